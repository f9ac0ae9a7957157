################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Tests for the transform parameter schema."""

from __future__ import annotations

from typing import Any

import pytest

from oasis_tf.config.tf_params import BUFFER_HORIZON_SEC
from oasis_tf.config.tf_params import TF_MATCH_THRESHOLD_SEC
from oasis_tf.config.tf_params import BufferParams
from oasis_tf.config.tf_params import OrthogonalizationParams
from oasis_tf.config.tf_params import TfParams
from oasis_tf.config.tf_params import TfParamsError


def test_defaults_validate() -> None:
    """Defaults should validate successfully."""
    params: TfParams = TfParams.defaults()
    params.validate()
    assert params.buffer.horizon_sec == BUFFER_HORIZON_SEC == 2.0
    assert params.buffer.match_threshold_sec == TF_MATCH_THRESHOLD_SEC == 0.1
    assert params.buffer.max_entries is None
    assert params.orthogonalization.max_iterations == 10


def test_nested_dict() -> None:
    """The nested dict mirrors the namespaces."""
    nested: dict[str, Any] = TfParams.defaults().as_nested_dict()
    assert nested == {
        "buffer": {
            "horizon_sec": 2.0,
            "match_threshold_sec": 0.1,
            "max_entries": None,
        },
        "orthogonalization": {
            "max_iterations": 10,
            "threshold": 1e-10,
        },
    }


def test_replace_namespace() -> None:
    """Replacing a namespace keeps the others."""
    params: TfParams = TfParams.defaults().replace(
        buffer=BufferParams(horizon_sec=5.0)
    )
    assert params.buffer.horizon_sec == 5.0
    assert params.orthogonalization == OrthogonalizationParams()


def test_from_dict_overrides() -> None:
    """Missing keys keep their defaults."""
    params: TfParams = TfParams.from_dict(
        {"buffer": {"max_entries": 1}, "orthogonalization": {"threshold": 1e-8}}
    )
    assert params.buffer.max_entries == 1
    assert params.buffer.horizon_sec == 2.0
    assert params.orthogonalization.threshold == 1e-8


def test_from_dict_rejects_unknown_keys() -> None:
    """Unknown namespaces and keys are rejected."""
    with pytest.raises(TfParamsError):
        TfParams.from_dict({"solver": {}})
    with pytest.raises(TfParamsError):
        TfParams.from_dict({"buffer": {"horizon": 1.0}})
    with pytest.raises(TfParamsError):
        TfParams.from_dict({"buffer": 3})


@pytest.mark.parametrize(
    "params",
    [
        TfParams.defaults().replace(buffer=BufferParams(horizon_sec=-0.1)),
        TfParams.defaults().replace(buffer=BufferParams(match_threshold_sec=True)),
        TfParams.defaults().replace(buffer=BufferParams(max_entries=0)),
        TfParams.defaults().replace(
            orthogonalization=OrthogonalizationParams(max_iterations=0)
        ),
        TfParams.defaults().replace(
            orthogonalization=OrthogonalizationParams(threshold=float("inf"))
        ),
        TfParams.defaults().replace(
            orthogonalization=OrthogonalizationParams(
                threshold="1e-10",  # type: ignore[arg-type]
            )
        ),
    ],
)
def test_invalid_values_raise(params: TfParams) -> None:
    """Invalid values fail validation."""
    with pytest.raises(TfParamsError):
        params.validate()
