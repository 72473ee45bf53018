# SPDX-License-Identifier: MIT

from typing import Any

import yaml.representer


class LiteralString(str):
    """Multi-line text written as a YAML literal block (| or |-)."""

    pass


def literal_string_representer(dumper: Any, data: str) -> Any:
    # The block indicator keeps the trailing newline state, so text
    # reloads exactly as it was written
    text = str(data)
    if "\n" in text:
        return dumper.represent_scalar("tag:yaml.org,2002:str", text, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", text)


yaml.representer.Representer.add_representer(LiteralString, literal_string_representer)
yaml.representer.SafeRepresenter.add_representer(
    LiteralString, literal_string_representer
)

try:
    from yaml.cyaml import CDumper as CYAMLDumper

    CYAMLDumper.add_representer(LiteralString, literal_string_representer)
except ImportError:
    pass
