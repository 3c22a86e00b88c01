"""Intelligence module - LLM stages, validation and completion detection."""
