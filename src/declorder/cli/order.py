"""declorder order command - print a class's methods in declaration order."""

from __future__ import annotations

import json
import os
from typing import Any

import click

from declorder.config.models import DeclOrderConfig
from declorder.core.errors import ArtifactError
from declorder.core.logging import get_logger
from declorder.order import (
    Classpath,
    JavaClass,
    MemberDescriptor,
    OrderRecoveryCoordinator,
    OrderResult,
)
from declorder.order._internal.classfile import ClassFile, parse_class_file
from declorder.order._internal.hierarchy import iter_ancestors


class _ClassLoader:
    """Builds ``JavaClass`` hierarchies from class files on a class path."""

    def __init__(self, classpath: Classpath) -> None:
        self._classpath = classpath
        self._classes: dict[str, JavaClass] = {}
        self._files: dict[str, ClassFile] = {}

    def class_file(self, name: str) -> ClassFile | None:
        return self._files.get(name)

    def load(self, name: str) -> JavaClass | None:
        """Load ``name`` and its supertypes; None when it is not on the class path."""
        if name in self._classes:
            return self._classes[name]
        data = self._classpath.find_resource(name.replace(".", "/") + ".class")
        if data is None:
            return None
        class_file = parse_class_file(data)
        superclass = self._load_or_stub(class_file.super_name) if class_file.super_name else None
        interfaces = tuple(self._load_or_stub(i) for i in class_file.interface_names)
        cls = JavaClass(class_file.name, superclass, interfaces, loader=self._classpath)
        self._classes[name] = cls
        self._files[cls.name] = class_file
        return cls

    def _load_or_stub(self, name: str) -> JavaClass:
        # Supertypes outside the class path (java.lang.Object, ...) resolve via boot
        return self.load(name) or JavaClass(name)


def _declared_methods(cls: JavaClass, class_file: ClassFile) -> list[MemberDescriptor]:
    return [
        MemberDescriptor.from_descriptor(cls, method.name, method.descriptor)
        for method in class_file.methods
        if not method.is_initializer and not method.is_synthetic
    ]


def _result_payload(
    class_name: str, source_file: str | None, result: OrderResult
) -> dict[str, Any]:
    methods = []
    for member in result.order:
        record = result.positions[member]
        methods.append(
            {
                "declaring_class": member.declaring_class.name,
                "name": member.name,
                "descriptor": member.descriptor,
                "position": record.position,
                "strategy": record.strategy,
            }
        )
    return {
        "class": class_name,
        "source_file": source_file,
        "resolved": result.resolved,
        "methods": methods,
    }


@click.command()
@click.argument("class_name")
@click.option(
    "-cp",
    "--classpath",
    "classpath_entries",
    multiple=True,
    required=True,
    help=f"Class path entry (directory or jar). Repeatable or '{os.pathsep}'-separated.",
)
@click.option("--deep", is_flag=True, help="Include methods declared by ancestors on the class path")
@click.option("--super-last", is_flag=True, help="List the most derived class's methods first")
@click.option(
    "--strategy",
    type=click.Choice(["auto", "javap", "classfile", "off"]),
    default=None,
    help="Line table facility (off = byte scan only)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def order_command(
    ctx: click.Context,
    class_name: str,
    classpath_entries: tuple[str, ...],
    deep: bool,
    super_last: bool,
    strategy: str | None,
    as_json: bool,
) -> None:
    """Print the methods of CLASS_NAME in source declaration order.

    Methods are enumerated from the class file in name order and then
    reordered. Exits with status 1 when some methods could not be placed.
    """
    config: DeclOrderConfig = (ctx.obj or {}).get("config") or DeclOrderConfig()
    if strategy is not None:
        config = config.model_copy(
            update={"line_table": config.line_table.model_copy(update={"mode": strategy})}
        )

    classpath = Classpath.parse(
        [part for entry in classpath_entries for part in entry.split(os.pathsep) if part]
    )
    loader = _ClassLoader(classpath)
    try:
        cls = loader.load(class_name)
        if cls is None:
            raise click.ClickException(f"Class {class_name} not found on class path")

        members: list[MemberDescriptor] = []
        for current in [cls, *iter_ancestors(cls)] if deep else [cls]:
            class_file = loader.class_file(current.name)
            if class_file is not None:
                members.extend(_declared_methods(current, class_file))
        members.sort(key=lambda m: (m.name, m.descriptor))

        result = OrderRecoveryCoordinator(config).recover_order(
            members, super_first=False if super_last else None
        )
    except ArtifactError as e:
        raise click.ClickException(str(e)) from e

    class_file = loader.class_file(cls.name)
    source_file = class_file.source_file if class_file else None
    get_logger("cli.order").debug(
        "order_recovered",
        class_name=cls.name,
        source_file=source_file,
        methods=len(result),
        unresolved=len(result.unresolved),
    )

    if as_json:
        click.echo(json.dumps(_result_payload(class_name, source_file, result), indent=2))
    else:
        for member in result.order:
            record = result.positions[member]
            position = "?" if record.position is None else str(record.position)
            owner = member.declaring_class.name
            click.echo(f"{position:>6}  {owner}.{member.name}{member.descriptor}")
        if not result.resolved:
            click.echo(f"{len(result.unresolved)} method(s) could not be placed", err=True)

    if not result.resolved:
        ctx.exit(1)
