"""Custom pylint rules for project typing and JSON handling policy."""

from __future__ import annotations

from collections.abc import Iterable

from astroid import nodes
from pylint.checkers import BaseChecker
from pylint.lint import PyLinter


_MESSAGE_PREFER_OPTIONAL = "prefer-optional"
_MESSAGE_NO_OBJECT_ANNOTATION = "no-object-annotation"
_MESSAGE_NO_STDLIB_JSON = "no-stdlib-json"

_STDLIB_JSON_MODULE = "json"


class ProjectRulesChecker(BaseChecker):
    """Project-specific AST checks."""

    name = "project-rules"

    msgs = {
        "C9501": (
            "Use Optional[T] instead of T | None in annotations",
            _MESSAGE_PREFER_OPTIONAL,
            "Project style requires Optional[T] for nullable annotations.",
        ),
        "C9502": (
            "Avoid object in type annotations; use a more specific type",
            _MESSAGE_NO_OBJECT_ANNOTATION,
            "Project style avoids object annotations when a better type exists.",
        ),
        "E9503": (
            "Import of the standard library %r module; use json_value_codec instead",
            _MESSAGE_NO_STDLIB_JSON,
            "Parsing and serialization go through this project's codec so that "
            "UTF-8 validation and output formatting stay uniform.",
        ),
    }

    def visit_annassign(self, node: nodes.AnnAssign) -> None:
        """Validate annotation style for annotated assignments."""
        self._check_annotation(node.annotation)

    def visit_arguments(self, node: nodes.Arguments) -> None:
        """Validate annotation style for function arguments."""
        for annotation in self._iter_argument_annotations(node):
            self._check_annotation(annotation)

    def visit_functiondef(self, node: nodes.FunctionDef) -> None:
        """Validate annotation style for function return type."""
        if node.returns is not None:
            self._check_annotation(node.returns)

    def visit_asyncfunctiondef(self, node: nodes.AsyncFunctionDef) -> None:
        """Validate annotation style for async function return type."""
        if node.returns is not None:
            self._check_annotation(node.returns)

    def visit_import(self, node: nodes.Import) -> None:
        """Reject ``import json`` and ``import json.<submodule>``."""
        for module_name, _alias in node.names:
            if _is_stdlib_json(module_name):
                self.add_message(_MESSAGE_NO_STDLIB_JSON, node=node, args=(module_name,))

    def visit_importfrom(self, node: nodes.ImportFrom) -> None:
        """Reject ``from json import ...``; relative imports are always allowed."""
        if node.level:
            return
        if node.modname and _is_stdlib_json(node.modname):
            self.add_message(_MESSAGE_NO_STDLIB_JSON, node=node, args=(node.modname,))

    def _check_annotation(self, annotation: nodes.NodeNG) -> None:
        for optional_union in self._iter_optional_pipe_unions(annotation):
            self.add_message(_MESSAGE_PREFER_OPTIONAL, node=optional_union)
        for object_name in self._iter_object_annotations(annotation):
            self.add_message(_MESSAGE_NO_OBJECT_ANNOTATION, node=object_name)

    @staticmethod
    def _iter_argument_annotations(arguments: nodes.Arguments) -> Iterable[nodes.NodeNG]:
        for annotation in arguments.posonlyargs_annotations:
            if annotation is not None:
                yield annotation
        for annotation in arguments.annotations:
            if annotation is not None:
                yield annotation
        for annotation in arguments.kwonlyargs_annotations:
            if annotation is not None:
                yield annotation
        if arguments.varargannotation is not None:
            yield arguments.varargannotation
        if arguments.kwargannotation is not None:
            yield arguments.kwargannotation

    @staticmethod
    def _iter_optional_pipe_unions(annotation: nodes.NodeNG) -> Iterable[nodes.BinOp]:
        for candidate in annotation.nodes_of_class(nodes.BinOp):
            if candidate.op != "|":
                continue
            if _is_none_literal(candidate.left) or _is_none_literal(candidate.right):
                yield candidate

    @staticmethod
    def _iter_object_annotations(annotation: nodes.NodeNG) -> Iterable[nodes.Name]:
        for candidate in annotation.nodes_of_class(nodes.Name):
            if candidate.name == "object":
                yield candidate


def _is_none_literal(node: nodes.NodeNG) -> bool:
    return isinstance(node, nodes.Const) and node.value is None


def _is_stdlib_json(module_name: str) -> bool:
    return module_name == _STDLIB_JSON_MODULE or module_name.startswith(f"{_STDLIB_JSON_MODULE}.")


def register(linter: PyLinter) -> None:
    """Register checker."""
    linter.register_checker(ProjectRulesChecker(linter))
