"""Application layer - Turning construction plans into factories."""

import ast
import inspect
import logging
from typing import Any, Callable, Dict, List

from blueprint_di.domain import (
    ActivationError,
    ConstantNode,
    ConstructionNode,
    ConstructorNode,
    InvokeNode,
    PlaceholderNode,
    type_name,
)

logger = logging.getLogger(__name__)

_FILENAME = "<blueprint-di-factory>"

_NO_ARGUMENTS = ast.arguments(
    posonlyargs=[],
    args=[],
    vararg=None,
    kwonlyargs=[],
    kw_defaults=[],
    kwarg=None,
    defaults=[],
)


class _ExpressionEmitter:
    """Emits a Python expression AST for a construction node tree.

    Delegates, constructors and constant values are bound as generated
    globals, so the emitted code only contains names and calls.
    """

    def __init__(self) -> None:
        self.generated_globals: Dict[str, Any] = {"__builtins__": {}}
        self._bound = 0

    def emit(self, node: Any) -> ast.expr:
        if isinstance(node, ConstantNode):
            return self._bind(node.value)

        if isinstance(node, InvokeNode):
            return ast.Call(
                func=self._bind(node.delegate),
                args=[self.emit(argument) for argument in node.arguments],
                keywords=[],
            )

        if isinstance(node, ConstructorNode):
            return self._emit_constructor_call(node)

        if isinstance(node, PlaceholderNode):
            raise ValueError(f"The placeholder for parameter '{node.parameter}' was never substituted.")

        raise TypeError(f"{node!r} is not a supported construction node.")

    def _emit_constructor_call(self, node: ConstructorNode) -> ast.expr:
        parameters = node.constructor.parameters
        if len(parameters) != len(node.arguments):
            raise ValueError(
                f"Constructor {node.constructor} expects {len(parameters)} arguments, "
                f"but the plan supplies {len(node.arguments)}."
            )

        args: List[ast.expr] = []
        keywords: List[ast.keyword] = []
        for parameter, argument in zip(parameters, node.arguments):
            value = self.emit(argument)
            if parameter.is_positional_only:
                args.append(value)
            else:
                keywords.append(ast.keyword(arg=parameter.name, value=value))

        return ast.Call(func=self._bind(node.constructor.factory), args=args, keywords=keywords)

    def _bind(self, value: Any) -> ast.Name:
        name = f"_v{self._bound}"
        self._bound += 1
        self.generated_globals[name] = value
        return ast.Name(id=name, ctx=ast.Load())


class PlanInterpreter:
    """Evaluates a construction node tree directly, on every call."""

    def evaluate(self, node: ConstructionNode) -> Any:
        if isinstance(node, ConstantNode):
            return node.value

        if isinstance(node, InvokeNode):
            return node.delegate(*[self.evaluate(argument) for argument in node.arguments])

        if isinstance(node, ConstructorNode):
            args = []
            kwargs = {}
            for parameter, argument in zip(node.constructor.parameters, node.arguments):
                if parameter.is_positional_only:
                    args.append(self.evaluate(argument))
                else:
                    kwargs[parameter.name] = self.evaluate(argument)
            return node.constructor.factory(*args, **kwargs)

        raise TypeError(f"{node!r} cannot be evaluated.")

    def validate(self, node: Any) -> None:
        """Check the tree can be evaluated, without evaluating it.

        Raises:
            ValueError: If a placeholder is left, or a constructor's arity does not match.
            TypeError: If the tree contains an unsupported node.
        """
        # The emitter performs exactly the checks evaluation relies on.
        _ExpressionEmitter().emit(node)


class FactoryCompiler:
    """Turns a finished construction node tree into a zero-argument factory.

    In compiled mode a ``lambda: <expression>`` is generated as an AST and
    compiled with :func:`compile`. In interpreted mode the returned closure
    walks the tree with :class:`PlanInterpreter` on each call.

    Attributes:
        _compile_factories: Whether to generate code instead of interpreting.
    """

    def __init__(self, compile_factories: bool = True) -> None:
        self._compile_factories = compile_factories

    def compile(self, node: ConstructionNode, target_type: Any) -> Callable[[], Any]:
        """Compile a construction plan into a factory.

        Args:
            node: Root of the construction plan.
            target_type: The type the factory is expected to produce.

        Returns:
            A callable taking no arguments and returning a new instance.

        Raises:
            ActivationError: If the plan cannot be turned into an invokable factory.

        Example:
            >>> factory = FactoryCompiler().compile(plan, UserService)
            >>> service = factory()
        """
        try:
            _check_result_type(node, target_type)
            if self._compile_factories:
                factory = _compile_to_function(node, target_type)
            else:
                factory = _interpreted_factory(node)
        except Exception as e:
            raise ActivationError(
                f"Error occurred while trying to build a factory for type {type_name(target_type)} "
                f"using the construction plan {node!r}. {e}",
                cause=e,
            ) from e

        logger.debug(
            "Built %s factory for %s",
            "compiled" if self._compile_factories else "interpreted",
            type_name(target_type),
        )
        return factory


def _check_result_type(node: Any, target_type: Any) -> None:
    result_type = getattr(node, "result_type", None)
    if not (inspect.isclass(result_type) and inspect.isclass(target_type)):
        return
    if not issubclass(result_type, target_type):
        raise TypeError(
            f"The plan produces {type_name(result_type)}, which is not a subclass of {type_name(target_type)}."
        )


def _compile_to_function(node: ConstructionNode, target_type: Any) -> Callable[[], Any]:
    emitter = _ExpressionEmitter()
    expression = ast.Expression(body=ast.Lambda(args=_NO_ARGUMENTS, body=emitter.emit(node)))
    ast.fix_missing_locations(expression)
    code = compile(expression, filename=_FILENAME, mode="eval")
    factory = eval(code, emitter.generated_globals)
    factory.__name__ = factory.__qualname__ = f"create_{type_name(target_type)}"
    return factory


def _interpreted_factory(node: ConstructionNode) -> Callable[[], Any]:
    interpreter = PlanInterpreter()
    interpreter.validate(node)

    def factory() -> Any:
        return interpreter.evaluate(node)

    return factory