"""Shared fixtures for core unit tests"""

import pytest

from poche.core.tokenize import tokenize


SAMPLE_MD = """\
# Saved Article

A paragraph with **bold** text
that wraps onto a second line.

## Details

- item one
- item two

```python
print("hello")
```

> Quoted *words*
continued here

| Name | Value |
|------|-------|
| a    | 1     |

![Diagram](/img/diagram.png)

---

Read the [original](../post.html).
"""


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(name="sample_tokens")
def sample_tokens_fixture():
    return tokenize(SAMPLE_MD)
