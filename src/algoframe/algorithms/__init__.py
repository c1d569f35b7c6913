"""Algorithm adapters over networkx.

Importing a submodule registers its algorithms with the default registry.
"""
