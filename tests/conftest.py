"""公共 fixtures：域、赋值与完备化。"""

import pytest

from valued_completion import (
    CompletionConfig,
    RationalField,
    padic_completion,
    padic_valuation,
)


@pytest.fixture
def qq():
    return RationalField()


@pytest.fixture
def v2():
    return padic_valuation(2)


@pytest.fixture
def v3():
    return padic_valuation(3)


@pytest.fixture
def small_config():
    return CompletionConfig(search_depth=24, law_check_levels=5, sample_span=4)


@pytest.fixture
def q2(small_config):
    return padic_completion(2, small_config)


@pytest.fixture
def q3(small_config):
    return padic_completion(3, small_config)


@pytest.fixture
def q7(small_config):
    return padic_completion(7, small_config)


@pytest.fixture
def q5(small_config):
    return padic_completion(5, small_config)
