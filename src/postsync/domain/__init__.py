"""Domain layer: reconciliation, bulk sync and duplicate handling, free of adapters."""
