"""Form helpers driven by field descriptors."""

from typing import Any, Mapping, Optional, Sequence

import click

from certdesk.domain.entities import FieldDescriptor


def option_name(descriptor: FieldDescriptor) -> str:
    """CLI option for a field, e.g. 'marks_total' -> '--marks-total'."""
    return "--" + descriptor.key.replace("_", "-")


def field_options(descriptors: Sequence[FieldDescriptor]):
    """Decorator adding one optional CLI option per field descriptor."""

    def decorator(f):
        # click applies options bottom-up, so reverse to keep --help in field order
        for descriptor in reversed(descriptors):
            f = click.option(
                option_name(descriptor),
                descriptor.key,
                default=None,
                help=f"{descriptor.label} ({descriptor.kind.value})",
            )(f)
        return f

    return decorator


def collect_field_values(
    descriptors: Sequence[FieldDescriptor], kwargs: Mapping[str, Any]
) -> dict[str, str]:
    """Pick the field values that were given on the command line."""
    return {
        d.key: kwargs[d.key] for d in descriptors if kwargs.get(d.key) is not None
    }


def prompt_form(
    descriptors: Sequence[FieldDescriptor],
    defaults: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """Prompt for every field in descriptor order.

    Required fields without a default must be answered; optional fields
    accept an empty answer.
    """
    defaults = defaults or {}
    values: dict[str, str] = {}
    for descriptor in descriptors:
        default = defaults.get(descriptor.key)
        if default is None and not descriptor.required:
            default = ""
        label = descriptor.label + (" *" if descriptor.required else "")
        values[descriptor.key] = click.prompt(
            label, default=default, show_default=bool(default), type=str
        )
    return values
