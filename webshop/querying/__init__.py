"""Tool layer exposed to LLM clients."""
