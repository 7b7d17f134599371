"""Reading a consistent graph snapshot for one reconcile pass."""

from contract_graph.exceptions import ContractGraphError, SourceUnavailableError
from contract_graph.graph.store import GraphStore
from contract_graph.models.graph_models import GraphModule


def read_graph_snapshot(store: GraphStore) -> list[GraphModule]:
    """Fetch all modules once.

    Store failures other than our own errors are wrapped into
    SourceUnavailableError so callers see a single connectivity condition.
    """
    try:
        return list(store.list_modules())
    except ContractGraphError:
        raise
    except Exception as exc:
        raise SourceUnavailableError(f"Graph store unavailable: {exc}") from exc
