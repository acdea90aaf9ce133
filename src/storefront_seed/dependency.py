"""Table dependency graph used to order schema creation and seed stages."""

from collections import defaultdict, deque

from storefront_seed.exceptions import CircularDependencyError, DependencyOrderError


class DependencyGraph:
    """Directed graph of foreign-key dependencies between tables."""

    def __init__(self):
        self._graph: dict[str, set[str]] = defaultdict(set)
        self._tables: set[str] = set()

    def add_table(self, table: str) -> None:
        """Add a table to the graph."""
        self._tables.add(table)
        self._graph.setdefault(table, set())

    def add_dependency(self, table: str, depends_on: str) -> None:
        """Add a dependency: table references depends_on.

        Self-references (e.g. a parent category) do not constrain ordering
        and are not recorded.
        """
        self.add_table(table)
        self.add_table(depends_on)
        if table != depends_on:
            self._graph[table].add(depends_on)

    def get_dependencies(self, table: str) -> list[str]:
        """Get all tables that this table depends on."""
        return sorted(self._graph.get(table, set()))

    def topological_sort(self) -> list[str]:
        """
        Sort tables in dependency order using Kahn's algorithm.

        Ties are broken alphabetically so the order is stable between runs.

        Returns:
            Tables in order such that dependencies come before dependents.

        Raises:
            CircularDependencyError: If circular dependency detected
        """
        in_degree = {table: len(self._graph[table]) for table in self._tables}
        dependents: dict[str, set[str]] = defaultdict(set)
        for table, deps in self._graph.items():
            for dep in deps:
                dependents[dep].add(table)

        queue = deque(sorted(t for t, degree in in_degree.items() if degree == 0))
        result = []

        while queue:
            table = queue.popleft()
            result.append(table)
            for other in sorted(dependents[table]):
                in_degree[other] -= 1
                if in_degree[other] == 0:
                    queue.append(other)

        if len(result) != len(self._tables):
            raise CircularDependencyError(self._tables - set(result))

        return result

    def validate_order(self, tables: list[str]) -> None:
        """
        Check that every table comes after the tables it references.

        Args:
            tables: Proposed processing order

        Raises:
            DependencyOrderError: If a table is scheduled before a dependency
        """
        seen: set[str] = set()
        for table in tables:
            for dep in self._graph.get(table, set()):
                if dep not in seen:
                    raise DependencyOrderError(table, dep)
            seen.add(table)
