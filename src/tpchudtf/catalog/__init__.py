from tpchudtf.catalog.abstract import AbstractCatalog


def get_catalog(catalog_type: str, **kwargs) -> AbstractCatalog:
    """
    Factory function to create catalogs.

    Args:
        catalog_type: Type of catalog ('memory', 'duckdb')
        **kwargs: Arguments to pass to the catalog constructor

    Returns:
        An instance of the requested catalog
    """
    if catalog_type.lower() == "memory":
        from tpchudtf.catalog.memory import InMemoryCatalog

        return InMemoryCatalog(**kwargs)
    if catalog_type.lower() == "duckdb":
        from tpchudtf.catalog.duckdb import DuckDBCatalog

        return DuckDBCatalog(**kwargs)

    supported = ["memory", "duckdb"]
    raise ValueError(f"Unsupported catalog type: {catalog_type}. Options: {', '.join(supported)}")


__all__ = ["AbstractCatalog", "get_catalog"]
