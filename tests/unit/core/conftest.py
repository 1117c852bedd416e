"""Shared documents for core unit tests"""

import pytest


TOML_POST = """\
+++
title = "Hello Unreal"
date = 2024-08-16T10:28:54-05:00
draft = false
tags = ["cpp", "unreal"]
subtitle = "foo"
+++

# Hello

Body text.
"""

YAML_POST = """\
---
title: Hello Unreal
date: 2024-08-16T10:28:54-05:00
draft: false
tags: [cpp, unreal]
subtitle: foo
---

# Hello

Body text.
"""

HEADERLESS = """\
# About Me

No front matter here.
"""


@pytest.fixture(name="toml_post")
def toml_post_fixture():
    return TOML_POST


@pytest.fixture(name="yaml_post")
def yaml_post_fixture():
    return YAML_POST


@pytest.fixture(name="headerless")
def headerless_fixture():
    return HEADERLESS
