"""
NEAT Run Package

Configuration, trial execution and persistence of evolutionary runs.

Modules:
    config:     Config class
    trial:      Trial abstract base class
    collection: Storage of trained populations on disk
"""

from neatarena.run.config     import Config
from neatarena.run.trial      import Trial
from neatarena.run.collection import CollectionLoadError, save_collection, load_collection, list_collections

__all__ = ['Config',
           'Trial',
           'CollectionLoadError',
           'save_collection',
           'load_collection',
           'list_collections']
