"""
Registry validation schemas.

Every registry document is checked against these schemas when it is loaded;
a violation is a data error and raises SchemaError.
"""

from typing import Any, Dict
import re

from mlcc.config.core import SchemaValidator, BusinessValidator, SchemaResult


ENV_VAR_NAME_PATTERN = "^[A-Z_][A-Z0-9_]*$"
INSTANCE_TYPE_PATTERN = "^ml\\.[a-z0-9]+\\.[a-z0-9]+$"
FRAMEWORK_NAME_PATTERN = "^[a-z0-9-]+$"
FRAMEWORK_VERSION_PATTERN = "^[0-9]+\\.[0-9]+\\.[0-9]+$"

VALIDATION_LEVELS = ["tested", "community-validated", "experimental", "unknown"]
ACCELERATOR_TYPES = ["cuda", "neuron", "cpu", "rocm"]

ENV_VARS_SCHEMA = {
    "type": "object",
    "propertyNames": {"pattern": ENV_VAR_NAME_PATTERN},
    "additionalProperties": {"type": "string"}
}


FRAMEWORK_PROFILE_SCHEMA = {
    "type": "object",
    "properties": {
        "displayName": {"type": "string", "minLength": 1},
        "description": {"type": "string"},
        "envVars": ENV_VARS_SCHEMA,
        "recommendedInstanceTypes": {
            "type": "array",
            "items": {"type": "string", "pattern": INSTANCE_TYPE_PATTERN}
        },
        "notes": {"type": "string"}
    },
    "required": ["displayName", "description"]
}

FRAMEWORK_ENTRY_SCHEMA = {
    "type": "object",
    "properties": {
        "baseImage": {"type": "string", "minLength": 1},
        "accelerator": {
            "type": "object",
            "properties": {
                "type": {"type": "string", "enum": ACCELERATOR_TYPES},
                "version": {"type": ["string", "null"]},
                "versionRange": {
                    "type": ["object", "null"],
                    "properties": {
                        "min": {"type": "string"},
                        "max": {"type": "string"}
                    },
                    "required": ["min", "max"]
                }
            },
            "required": ["type"]
        },
        "envVars": ENV_VARS_SCHEMA,
        "inferenceAmiVersion": {"type": "string", "minLength": 1},
        "recommendedInstanceTypes": {
            "type": "array",
            "items": {"type": "string", "pattern": INSTANCE_TYPE_PATTERN},
            "minItems": 1
        },
        "validationLevel": {"type": "string", "enum": VALIDATION_LEVELS},
        "profiles": {
            "type": "object",
            "propertyNames": {"pattern": FRAMEWORK_NAME_PATTERN},
            "additionalProperties": FRAMEWORK_PROFILE_SCHEMA
        },
        "notes": {"type": "string"}
    },
    "required": [
        "baseImage", "accelerator", "envVars", "inferenceAmiVersion",
        "recommendedInstanceTypes", "validationLevel"
    ]
}

FRAMEWORK_REGISTRY_SCHEMA = {
    "type": "object",
    "propertyNames": {"pattern": FRAMEWORK_NAME_PATTERN},
    "additionalProperties": {
        "type": "object",
        "propertyNames": {"pattern": FRAMEWORK_VERSION_PATTERN},
        "additionalProperties": FRAMEWORK_ENTRY_SCHEMA
    }
}


MODEL_PROFILE_SCHEMA = {
    "type": "object",
    "properties": {
        "displayName": {"type": "string", "minLength": 1},
        "description": {"type": "string"},
        "envVars": ENV_VARS_SCHEMA,
        "recommendedInstanceTypes": {
            "type": "array",
            "items": {"type": "string", "pattern": INSTANCE_TYPE_PATTERN}
        },
        "notes": {"type": "string"}
    },
    "required": ["displayName", "envVars"]
}

MODEL_ENTRY_SCHEMA = {
    "type": "object",
    "properties": {
        "family": {"type": "string", "minLength": 1},
        "chatTemplate": {"type": ["string", "null"]},
        "requiresTemplate": {"type": "boolean"},
        "validationLevel": {"type": "string", "enum": ["tested", "community-validated", "experimental"]},
        "frameworkCompatibility": {
            "type": "object",
            "additionalProperties": {"type": "string"}
        },
        "profiles": {
            "type": "object",
            "additionalProperties": MODEL_PROFILE_SCHEMA
        },
        "envVars": ENV_VARS_SCHEMA,
        "recommendedInstanceTypes": {
            "type": "array",
            "items": {"type": "string", "pattern": INSTANCE_TYPE_PATTERN}
        },
        "notes": {"type": "string"}
    },
    "required": ["family", "chatTemplate", "requiresTemplate", "validationLevel", "frameworkCompatibility"]
}

MODEL_REGISTRY_SCHEMA = {
    "type": "object",
    "additionalProperties": MODEL_ENTRY_SCHEMA
}


INSTANCE_ENTRY_SCHEMA = {
    "type": "object",
    "properties": {
        "family": {"type": "string", "minLength": 1},
        "accelerator": {
            "type": "object",
            "properties": {
                "type": {"type": "string", "enum": ACCELERATOR_TYPES},
                "hardware": {"type": "string"},
                "architecture": {"type": "string"},
                "versions": {"type": ["array", "null"], "items": {"type": "string"}},
                "default": {"type": ["string", "null"]}
            },
            "required": ["type", "hardware", "architecture", "versions", "default"]
        },
        "memory": {"type": "string", "pattern": "^[0-9]+ (GB|TB)$"},
        "vcpus": {"type": "integer", "minimum": 1},
        "notes": {"type": "string"}
    },
    "required": ["family", "accelerator", "memory", "vcpus"]
}

INSTANCE_REGISTRY_SCHEMA = {
    "type": "object",
    "propertyNames": {"pattern": INSTANCE_TYPE_PATTERN},
    "additionalProperties": INSTANCE_ENTRY_SCHEMA
}


FLAG_SPEC_SCHEMA = {
    "type": "object",
    "properties": {
        "type": {"type": "string"},
        "min": {"type": "number"},
        "max": {"type": "number"},
        "description": {"type": "string"},
        "deprecated": {"type": "boolean"},
        "deprecationMessage": {"type": "string"},
        "replacement": {"type": "string"}
    }
}

KNOWN_FLAGS_SCHEMA = {
    "type": "object",
    "additionalProperties": {
        "type": "object",
        "additionalProperties": {
            "type": "object",
            "propertyNames": {"pattern": ENV_VAR_NAME_PATTERN},
            "additionalProperties": FLAG_SPEC_SCHEMA
        }
    }
}

COMMUNITY_REPORT_SCHEMA = {
    "type": "object",
    "properties": {
        "variable": {"type": "string"},
        "pattern": {"type": "string"},
        "description": {"type": "string"},
        "message": {"type": "string"},
        "severity": {"type": "string", "enum": ["warning", "error"]},
        "reporter": {"type": "string"}
    }
}

COMMUNITY_REPORTS_SCHEMA = {
    "type": "object",
    "additionalProperties": {
        "type": "object",
        "additionalProperties": {
            "type": "array",
            "items": COMMUNITY_REPORT_SCHEMA
        }
    }
}


REGISTRY_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "frameworks": FRAMEWORK_REGISTRY_SCHEMA,
    "models": MODEL_REGISTRY_SCHEMA,
    "instances": INSTANCE_REGISTRY_SCHEMA,
    "known_flags": KNOWN_FLAGS_SCHEMA,
    "community_reports": COMMUNITY_REPORTS_SCHEMA,
}


def _community_report_rules(data: Dict[str, Any]) -> list:
    errors = []
    for framework, buckets in data.items():
        for bucket, reports in buckets.items():
            for index, report in enumerate(reports):
                if not report.get("variable") and not report.get("pattern"):
                    errors.append(f"{framework}.{bucket}[{index}]: report needs 'variable' or 'pattern'")
                if report.get("pattern"):
                    try:
                        re.compile(report["pattern"])
                    except re.error as e:
                        errors.append(f"{framework}.{bucket}[{index}]: invalid pattern: {e}")
                if not report.get("description") and not report.get("message"):
                    errors.append(f"{framework}.{bucket}[{index}]: report needs 'description'")
    return errors


BUSINESS_RULES = {
    "community_reports": [_community_report_rules],
}


def validate_registry_document(registry_name: str, data: Any) -> SchemaResult:
    """
    Validate a registry document.

    Parameters
    ----------
    registry_name : str
        One of the keys of REGISTRY_SCHEMAS
    data : Any
        Parsed document

    Returns
    -------
    SchemaResult
        Result holding every issue found
    """
    validator = SchemaValidator(registry_name, REGISTRY_SCHEMAS[registry_name])
    result = validator.validate(data)

    if result.is_valid and registry_name in BUSINESS_RULES:
        result.merge(BusinessValidator(registry_name, BUSINESS_RULES[registry_name]).validate(data))

    return result
