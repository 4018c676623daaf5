"""
Registry loading.

Reads the YAML registry documents, validates them against their schemas and
builds the typed records. All checks happen here, once per process; a store
that was built successfully is never re-validated.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union
import threading

import yaml
from yaml.constructor import ConstructorError

from mlcc.core.exceptions import RegistryLoadError, SchemaError
from mlcc.logger import get_mlcc_logger
from .entries import FrameworkEntry, InstanceEntry, ModelEntry
from .schema import validate_registry_document
from .store import PatternTable, RegistryStore

DEFAULT_DATA_DIR = Path(__file__).parent / "data"

REGISTRY_FILES = {
    "frameworks": "frameworks.yaml",
    "models": "models.yaml",
    "instances": "instances.yaml",
    "known_flags": "known_flags.yaml",
    "community_reports": "community_reports.yaml",
}

# Documents that may be absent; their strategies then have no data
OPTIONAL_REGISTRIES = ("known_flags", "community_reports")


class UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects duplicate mapping keys instead of keeping the last one."""

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            if key_node.tag == 'tag:yaml.org,2002:merge':
                continue
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise ConstructorError(
                    "while constructing a mapping", node.start_mark,
                    f"found duplicate key {key!r}", key_node.start_mark
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


class RegistryLoader:
    """
    Loads registry documents from a data directory.

    Parameters
    ----------
    data_dir : str or Path, optional
        Directory holding the registry YAML files; defaults to the data
        shipped with the package
    """

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        self.data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
        self.logger = get_mlcc_logger().bind(component="RegistryLoader")

    def load_document(self, registry_name: str) -> Dict[str, Any]:
        """
        Read and validate one registry document.

        Raises
        ------
        RegistryLoadError
            If a required file is missing or is not a YAML mapping
        SchemaError
            If the document violates its schema
        """
        path = self.data_dir / REGISTRY_FILES[registry_name]

        if not path.exists():
            if registry_name in OPTIONAL_REGISTRIES:
                self.logger.debug("Optional registry not present", registry=registry_name, path=str(path))
                return {}
            raise RegistryLoadError(registry_name, str(path), "file not found")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.load(f, Loader=UniqueKeyLoader)
        except (OSError, yaml.YAMLError) as e:
            raise RegistryLoadError(registry_name, str(path), str(e)) from e

        data = data or {}
        if not isinstance(data, dict):
            raise RegistryLoadError(registry_name, str(path), "document must be a mapping")

        result = validate_registry_document(registry_name, data)
        if not result.is_valid:
            self.logger.error("Registry failed schema validation",
                              registry=registry_name, issues=result.messages)
            raise SchemaError(registry_name, result.messages)

        return data

    def load(self) -> RegistryStore:
        """Load every registry document and build the store."""
        frameworks = self.load_document("frameworks")
        models = self.load_document("models")
        instances = self.load_document("instances")

        store = build_store(
            frameworks=frameworks,
            models=models,
            instances=instances,
            known_flags=self.load_document("known_flags"),
            community_reports=self.load_document("community_reports"),
            validate=False,
        )

        self.logger.info(
            "Registries loaded",
            data_dir=str(self.data_dir),
            frameworks=len(store.frameworks),
            models=len(store.models),
            instances=len(store.instances),
        )
        return store


def build_store(frameworks: Dict[str, Any], models: Dict[str, Any], instances: Dict[str, Any],
                known_flags: Optional[Dict[str, Any]] = None,
                community_reports: Optional[Dict[str, Any]] = None,
                validate: bool = True) -> RegistryStore:
    """
    Build a RegistryStore from already-parsed documents.

    Raises
    ------
    SchemaError
        If ``validate`` is set and a document violates its schema
    """
    documents = {
        "frameworks": frameworks,
        "models": models,
        "instances": instances,
        "known_flags": known_flags or {},
        "community_reports": community_reports or {},
    }
    if validate:
        for name, data in documents.items():
            result = validate_registry_document(name, data)
            if not result.is_valid:
                raise SchemaError(name, result.messages)

    framework_entries: Dict[tuple, FrameworkEntry] = {}
    for framework, versions in frameworks.items():
        for version, data in versions.items():
            key = (framework, str(version))
            if key in framework_entries:
                raise SchemaError("frameworks", [f"duplicate entry for {framework} {version}"])
            framework_entries[key] = FrameworkEntry.from_dict(framework, str(version), data)

    model_table = PatternTable(
        (key, ModelEntry.from_dict(key, data)) for key, data in models.items()
    )
    instance_entries = {
        instance_type: InstanceEntry.from_dict(instance_type, data)
        for instance_type, data in instances.items()
    }

    return RegistryStore(
        frameworks=framework_entries,
        models=model_table,
        instances=instance_entries,
        known_flags=documents["known_flags"],
        community_reports=documents["community_reports"],
    )


_store_cache: Dict[Path, RegistryStore] = {}
_store_lock = threading.Lock()


def load_registry_store(data_dir: Optional[Union[str, Path]] = None, reload: bool = False) -> RegistryStore:
    """
    Return the registry store for a data directory, loading it on first use.
    """
    path = Path(data_dir).resolve() if data_dir else DEFAULT_DATA_DIR.resolve()
    with _store_lock:
        if reload or path not in _store_cache:
            _store_cache[path] = RegistryLoader(path).load()
        return _store_cache[path]


def clear_registry_cache():
    with _store_lock:
        _store_cache.clear()
