"""
NEAT Collection Module

A collection is a trained population stored on disk under a name, so that
training can be continued later. Each collection is a single JSON document
holding everything 'Population.to_dict' produces: the hyperparameters, the
innovation table, the species and the genomes.

Functions:
    save_collection(population, name, root): Store a population under a name
    load_collection(name, root):             Restore a stored population
    list_collections(root):                  Names of all stored populations

Exceptions:
    CollectionLoadError: A stored population could not be restored
"""

import json
import logging
from pathlib import Path

from neatarena.pool import Population

logger = logging.getLogger(__name__)

DEFAULT_ROOT = Path("collections")
SUFFIX       = ".json"

class CollectionLoadError(Exception):
    """
    Raised when a stored population cannot be restored (missing file,
    malformed document, missing or invalid fields).
    """

def _collection_path(name: str, root) -> Path:
    if not name or not name.strip():
        raise ValueError("Collection name must not be empty")
    if "/" in name or "\\" in name or name in (".", ".."):
        raise ValueError(f"Collection name must not contain path separators: '{name}'")
    return Path(root) / f"{name}{SUFFIX}"

def save_collection(population: Population, name: str, root=DEFAULT_ROOT) -> Path:
    """
    Store a population under a name, replacing any collection with the same name.

    Parameters:
        population: The population to store
        name:       Name of the collection
        root:       Directory holding the collections (created if missing)

    Returns:
        The path of the written file
    """
    path = _collection_path(name, root)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as file:
        json.dump(population.to_dict(), file, indent=2)

    logger.info("Saved collection '%s' (generation %d, %d genomes) to %s",
                name, population.generation, len(population.genomes), path)
    return path

def load_collection(name: str, root=DEFAULT_ROOT) -> Population:
    """
    Restore a population stored with 'save_collection'.

    Raises:
        CollectionLoadError: if the collection is missing or cannot be parsed
    """
    path = _collection_path(name, root)
    if not path.is_file():
        raise CollectionLoadError(f"Collection '{name}' not found in {path.parent}")

    try:
        with open(path) as file:
            population_dict = json.load(file)
    except json.JSONDecodeError as e:
        raise CollectionLoadError(f"Collection '{name}' is not valid JSON: {e}") from e

    try:
        population = Population.from_dict(population_dict)
    except (KeyError, ValueError, TypeError, IndexError) as e:
        raise CollectionLoadError(f"Collection '{name}' is invalid: {e!r}") from e

    logger.info("Loaded collection '%s' (generation %d, %d genomes)",
                name, population.generation, len(population.genomes))
    return population

def list_collections(root=DEFAULT_ROOT) -> list[str]:
    """
    Returns:
        The sorted names of the collections stored in 'root' (empty if 'root' does not exist)
    """
    root = Path(root)
    if not root.is_dir():
        return []
    return sorted(path.stem for path in root.glob(f"*{SUFFIX}") if path.is_file())
