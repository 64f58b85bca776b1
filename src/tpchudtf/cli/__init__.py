"""Command line tools for tpchudtf."""
