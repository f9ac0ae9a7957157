################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""YAML persistence of transform subsystem parameters."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from oasis_tf.config.tf_params import TfParams
from oasis_tf.config.tf_params import TfParamsError


class TfParamsPersistenceError(Exception):
    """Raised when loading or saving parameter files fails."""


def is_yaml_path(path: str | os.PathLike[str]) -> bool:
    """Return True if the path has a YAML extension."""
    suffix: str = Path(os.fspath(path)).suffix.lower()
    return suffix in {".yaml", ".yml"}


def dumps_params_yaml(params: TfParams) -> str:
    """Serialize parameters to deterministic YAML."""
    return yaml.safe_dump(
        params.as_nested_dict(),
        sort_keys=False,
        indent=2,
        default_flow_style=False,
    )


def loads_params_yaml(text: str) -> TfParams:
    """
    Parse parameters from YAML text

    An empty document yields the defaults.
    """
    try:
        loaded: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise TfParamsPersistenceError("Malformed parameter YAML") from exc

    if loaded is None:
        return TfParams.defaults()
    if not isinstance(loaded, dict):
        raise TfParamsPersistenceError("YAML root must be a mapping")

    try:
        return TfParams.from_dict(loaded)
    except (TfParamsError, TypeError) as exc:
        raise TfParamsPersistenceError(f"Invalid parameters: {exc}") from exc


def save_params_yaml(
    path: str | os.PathLike[str],
    params: TfParams,
    *,
    atomic_write: bool = True,
) -> None:
    """Save parameters to disk as YAML."""
    if not is_yaml_path(path):
        raise TfParamsPersistenceError("Path must end with .yaml or .yml")

    path_obj: Path = Path(os.fspath(path))
    try:
        params.validate()
        path_obj.parent.mkdir(parents=True, exist_ok=True)
        text: str = dumps_params_yaml(params)
        if atomic_write:
            tmp_name: str = f".{path_obj.name}.tmp.{os.getpid()}"
            tmp_path: Path = path_obj.with_name(tmp_name)
            with tmp_path.open("w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, path_obj)
        else:
            path_obj.write_text(text, encoding="utf-8")
    except (OSError, TfParamsError) as exc:
        raise TfParamsPersistenceError(
            f"Failed to save parameters to {path_obj}"
        ) from exc


def load_params_yaml(path: str | os.PathLike[str]) -> TfParams:
    """Load parameters from a YAML file."""
    if not is_yaml_path(path):
        raise TfParamsPersistenceError("Path must end with .yaml or .yml")

    path_obj: Path = Path(os.fspath(path))
    try:
        text: str = path_obj.read_text(encoding="utf-8")
    except OSError as exc:
        raise TfParamsPersistenceError(
            f"Failed to load parameters from {path_obj}"
        ) from exc

    return loads_params_yaml(text)
