# Repositories are imported directly from submodules.
