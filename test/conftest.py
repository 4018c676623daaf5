"""
Shared pytest configuration and fixtures for the mlcc tests.
"""

import shutil

import pytest

from mlcc.config.system import EngineSettings
from mlcc.registry import build_store, clear_registry_cache, load_registry_store
from mlcc.registry.loader import DEFAULT_DATA_DIR


@pytest.fixture(scope="session")
def registry_store():
    """
    The registries shipped with the package.
    Session scope means the YAML files are parsed once per test session.
    """
    clear_registry_cache()
    return load_registry_store()


@pytest.fixture
def registry_dir(tmp_path):
    """A writable copy of the shipped registry directory."""
    target = tmp_path / "registries"
    shutil.copytree(DEFAULT_DATA_DIR, target)
    return target


@pytest.fixture
def offline_settings():
    """Engine settings that never reach the network."""
    return EngineSettings(offline=True)


@pytest.fixture
def framework_data():
    """A minimal, schema-valid framework registry document."""
    return {
        "vllm": {
            "0.4.0": {
                "baseImage": "vllm/vllm-openai:v0.4.0",
                "accelerator": {"type": "cuda", "version": "12.1",
                                "versionRange": {"min": "12.0", "max": "12.3"}},
                "envVars": {"VLLM_MAX_NUM_SEQS": "256"},
                "inferenceAmiVersion": "al2-ami-sagemaker-inference-gpu-3-1",
                "recommendedInstanceTypes": ["ml.g5.xlarge"],
                "validationLevel": "tested",
                "profiles": {
                    "low-latency": {
                        "displayName": "Low Latency",
                        "description": "Small batches",
                        "envVars": {"VLLM_MAX_NUM_SEQS": "32"},
                        "recommendedInstanceTypes": ["ml.g5.2xlarge"],
                    }
                },
            }
        }
    }


@pytest.fixture
def instance_data():
    """A minimal, schema-valid instance registry document."""
    return {
        "ml.g5.xlarge": {
            "family": "g5",
            "accelerator": {"type": "cuda", "hardware": "NVIDIA A10G", "architecture": "Ampere",
                            "versions": ["11.8", "12.1"], "default": "12.1"},
            "memory": "16 GB",
            "vcpus": 4,
        },
        "ml.inf2.xlarge": {
            "family": "inf2",
            "accelerator": {"type": "neuron", "hardware": "AWS Inferentia2", "architecture": "Inferentia2",
                            "versions": ["2.16.0"], "default": "2.16.0"},
            "memory": "16 GB",
            "vcpus": 4,
        },
    }


@pytest.fixture
def small_store(framework_data, instance_data):
    """A store built from the minimal documents, with two model patterns."""
    models = {
        "acme/exact-model": {
            "family": "acme", "chatTemplate": None, "requiresTemplate": False,
            "validationLevel": "tested", "frameworkCompatibility": {"vllm": ">=0.4.0"},
        },
        "acme/*": {
            "family": "acme-any", "chatTemplate": None, "requiresTemplate": False,
            "validationLevel": "experimental", "frameworkCompatibility": {},
        },
        "acme/special-*": {
            "family": "acme-special", "chatTemplate": None, "requiresTemplate": False,
            "validationLevel": "community-validated", "frameworkCompatibility": {},
        },
    }
    return build_store(framework_data, models, instance_data)
