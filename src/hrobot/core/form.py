"""
Hetzner Robot Client - Form Encoding

Two encoders live here. ``encode_form`` is the general-purpose
``application/x-www-form-urlencoded`` encoder. The hierarchical encoder
builds keys such as ``rules[input][0][action]`` whose brackets the
webservice requires to stay literal; a standard encoder would escape them.
Its output is wrapped in ``EncodedForm`` so it can only be sent through the
raw body path of the client.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import quote_plus, urlencode

FormData = Union[Mapping[str, Any], Sequence[Tuple[str, Any]]]

INPUT = "input"
OUTPUT = "output"


@dataclass(frozen=True)
class EncodedForm:
    """Pre-encoded form body whose keys must not be escaped again."""

    text: str

    def __bool__(self) -> bool:
        return bool(self.text)

    def __str__(self) -> str:
        return self.text


def form_value(value: Any) -> str:
    """Render a scalar the way the webservice expects it in a form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_form(data: FormData) -> str:
    """Standard form encoding; keys and values are both escaped.

    Mappings are emitted in sorted key order, pair sequences in their given
    order. List values become repeated keys.
    """
    if isinstance(data, Mapping):
        items = sorted(data.items())
    else:
        items = list(data)

    pairs = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, form_value(v)) for v in value)
        else:
            pairs.append((key, form_value(value)))
    return urlencode(pairs)


def _join(parts: Iterable[str]) -> str:
    return "&".join(p for p in parts if p)


def encode_rules(direction: str, rules: Sequence[Mapping[str, Any]]) -> str:
    """Encode one direction's rules as ``rules[direction][index][field]=value``."""
    parts = []
    for index, rule in enumerate(rules):
        for field, value in rule.items():
            if value is None:
                continue
            parts.append(f"rules[{direction}][{index}][{field}]={quote_plus(form_value(value))}")
    return _join(parts)


def encode_firewall_rules(
    input_rules: Sequence[Mapping[str, Any]],
    output_rules: Sequence[Mapping[str, Any]],
    fields: Optional[Mapping[str, Any]] = None,
) -> EncodedForm:
    """Encode firewall rules plus top-level fields into one form body.

    Top-level fields come first, then input rules, then output rules. A
    direction without rules contributes no keys at all.

    Args:
        input_rules: Ordered input-direction rules, one field map each
        output_rules: Ordered output-direction rules
        fields: Flat top-level fields such as ``status``

    Returns:
        EncodedForm ready for ``RobotClient.post_raw``
    """
    parts = []
    for key, value in (fields or {}).items():
        if value is None:
            continue
        parts.append(f"{key}={quote_plus(form_value(value))}")
    parts.append(encode_rules(INPUT, input_rules))
    parts.append(encode_rules(OUTPUT, output_rules))
    return EncodedForm(_join(parts))


def encode_bracket_list(name: str, values: Iterable[Any]) -> EncodedForm:
    """Encode ``name[]=v1&name[]=v2`` with literal brackets."""
    return EncodedForm(_join(f"{name}[]={quote_plus(form_value(v))}" for v in values))


class FirewallRuleEncoder:
    """Collects firewall rules per direction for hierarchical encoding."""

    def __init__(self):
        self.input_rules: list[dict[str, Any]] = []
        self.output_rules: list[dict[str, Any]] = []

    def add_input_rule(self, rule: Mapping[str, Any]) -> "FirewallRuleEncoder":
        self.input_rules.append(dict(rule))
        return self

    def add_output_rule(self, rule: Mapping[str, Any]) -> "FirewallRuleEncoder":
        self.output_rules.append(dict(rule))
        return self

    def encode(self) -> EncodedForm:
        return encode_firewall_rules(self.input_rules, self.output_rules)

    def encode_with(self, fields: Mapping[str, Any]) -> EncodedForm:
        """Encode rules preceded by the given top-level fields."""
        return encode_firewall_rules(self.input_rules, self.output_rules, fields)
