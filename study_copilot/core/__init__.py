"""Generation core: error taxonomy, data model, extraction and the fallback invoker."""
