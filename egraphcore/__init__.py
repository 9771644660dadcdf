"""Tables, column indexes, rule IR and type-constraint solving for an e-graph engine."""

__version__ = "0.1.0"
__all__ = ["index", "rules", "solver", "table", "terms", "typeconstraints"]