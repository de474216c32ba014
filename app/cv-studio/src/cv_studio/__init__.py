"""CV Studio: LLM-assisted résumé parsing, editing, analysis and rendering."""

__version__ = "1.0.0"
