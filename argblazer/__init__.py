"""ArgBlazer — abstract argumentation semantics and step-by-step reports."""

__version__ = "1.0.0"
