import pulumi as p
import pulumi_kubernetes as k8s


def get_k8s_provider() -> k8s.Provider | None:
    """
    Returns a provider for the `kubeconfig` stack secret.

    Without that setting resources fall back to the default provider, which
    uses the ambient kubeconfig of the machine running pulumi.
    """
    kubeconfig = p.Config().get_secret('kubeconfig')
    if kubeconfig is None:
        return None
    return k8s.Provider('k8s', kubeconfig=kubeconfig)
