"""
Profile resolution.

A profile is a named overlay declared on a framework or model entry. Applying
one produces a new entry; the registry record and the profile are left as
they were.
"""

from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, TypeVar, Union

from mlcc.core.exceptions import ProfileNotFoundError
from .entries import FrameworkEntry, ModelEntry, Profile, freeze_mapping

Entry = TypeVar('Entry', FrameworkEntry, ModelEntry)


def overlay(base: Optional[Mapping[str, Any]], patch: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return a new dict holding ``base`` with ``patch`` keys replacing same-named keys."""
    merged = dict(base or {})
    merged.update(patch or {})
    return merged


def list_profiles(entry: Union[FrameworkEntry, ModelEntry]) -> List[str]:
    return list(entry.profiles.keys())


def get_profile(entry: Union[FrameworkEntry, ModelEntry], profile_name: Optional[str]) -> Optional[Profile]:
    if not profile_name:
        return None
    return entry.profiles.get(profile_name)


def apply_profile(entry: Entry, profile_name: Optional[str]) -> Entry:
    """
    Apply a named profile to a registry entry.

    Parameters
    ----------
    entry : FrameworkEntry or ModelEntry
        The base entry
    profile_name : str, optional
        Profile to apply; None (or empty) returns ``entry`` itself

    Returns
    -------
    FrameworkEntry or ModelEntry
        New entry whose env vars are the base overlaid with the profile's and
        whose recommended instance types are the profile's when declared

    Raises
    ------
    ProfileNotFoundError
        If the entry does not declare ``profile_name``
    """
    if not profile_name:
        return entry

    profile = get_profile(entry, profile_name)
    if profile is None:
        entry_key = getattr(entry, 'key', None)
        raise ProfileNotFoundError(profile_name, entry_key, list_profiles(entry))

    recommended = profile.recommended_instance_types
    if recommended is None:
        recommended = entry.recommended_instance_types

    return replace(
        entry,
        env_vars=freeze_mapping(overlay(entry.env_vars, profile.env_vars)),
        recommended_instance_types=recommended,
        applied_profile=profile_name,
    )
