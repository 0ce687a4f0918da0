"""
stackdeploy.stack.tags — Image tag replacement.

Tag replacements come as multi-line text, one pair per line:

    alpine:3.20
    ghcr.io/acme/api:sha-0142c14
    registry.local:5000/worker:2.1

Every `image:` declaration naming one of these images gets its tag
rewritten. The definition is matched as text, not parsed as YAML,
so comments, quoting and indentation survive untouched:

    services:
      first:
        image: alpine:latest      →    image: alpine:3.20
      second: {image: "alpine"}   →    second: {image: "alpine:3.20"}
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field


# Characters that end an image reference (whitespace, quotes, flow delimiters)
_REF_END = r"""\s"',}\]"""


@dataclass
class TagReplacementSpec:
    """image name → new tag. Later duplicates override earlier ones."""
    tags: dict[str, str] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.tags)

    def __len__(self) -> int:
        return len(self.tags)

    def items(self):
        return self.tags.items()


def parse_tag_spec(raw: str | None) -> TagReplacementSpec:
    """Parse "imageName:newTag" lines.

    Blank lines and malformed pairs (no colon, empty side) are dropped.
    The split is on the last colon, so a registry port stays part
    of the image name.

    >>> parse_tag_spec("alpine:3.20\\n\\nbroken\\n").tags
    {'alpine': '3.20'}
    """
    spec = TagReplacementSpec()
    if not raw:
        return spec

    for line in raw.splitlines():
        line = line.strip()
        if not line:
            continue
        image, sep, tag = line.rpartition(":")
        image, tag = image.strip(), tag.strip()
        if not sep or not image or not tag:
            continue
        spec.tags[image] = tag
    return spec


def _image_pattern(image: str) -> re.Pattern:
    # prefix: "image:" not glued to a preceding word, spacing, optional quote
    return re.compile(
        r"(?P<prefix>(?<![^\s{,\[])image:[ \t]*[\"']?)"
        + re.escape(image)
        + rf"(?::[^{_REF_END}/:]*)?"
        + rf"(?=[{_REF_END}]|$)"
    )


def replace_tags(definition: str, spec: TagReplacementSpec | str) -> str:
    """Rewrite image tags in a stack definition.

    Args:
        definition: stack definition text
        spec: parsed spec or the raw multi-line text

    Returns:
        Definition with matching image tags replaced
    """
    if isinstance(spec, str):
        spec = parse_tag_spec(spec)

    for image, tag in spec.items():
        replacement = f"{image}:{tag}"
        definition = _image_pattern(image).sub(
            lambda m: m.group("prefix") + replacement, definition,
        )
    return definition
