import inspect
from typing import TYPE_CHECKING, Any, Callable, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from blueprint_di.domain.interfaces import ILifestyle, IRegistration


class ParameterDescriptor(BaseModel):
    """Value object describing one formal parameter of a constructor.

    Attributes:
        declaring_type: The implementation type that owns the constructor.
        constructor_name: ``"__init__"`` for the primary constructor, else the classmethod name.
        name: The parameter name.
        position: Zero-based position among the injectable parameters.
        kind: The ``inspect.Parameter`` kind of the parameter.
        annotation: The resolved type hint, or None when the parameter lacks one.
        default: The default value, or ``inspect.Parameter.empty``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    declaring_type: Type = Field(..., description="The type declaring the constructor.")
    constructor_name: str = Field(default="__init__", description="Name of the declaring constructor.")
    name: str = Field(..., description="The parameter name.")
    position: int = Field(default=0, description="Position among the injectable parameters.")
    kind: Any = Field(
        default=inspect.Parameter.POSITIONAL_OR_KEYWORD,
        description="The inspect.Parameter kind.",
    )
    annotation: Any = Field(default=None, description="The resolved type hint, if any.")
    default: Any = Field(default=inspect.Parameter.empty, description="The default value, if any.")

    @property
    def key(self) -> Tuple[Type, str, str]:
        """Formal-parameter identity, independent of annotation and default."""
        return (self.declaring_type, self.constructor_name, self.name)

    @property
    def has_annotation(self) -> bool:
        return self.annotation is not None

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty

    @property
    def is_positional_only(self) -> bool:
        return self.kind == inspect.Parameter.POSITIONAL_ONLY

    def __str__(self) -> str:
        type_name = getattr(self.annotation, "__name__", repr(self.annotation))
        return f"{self.name}: {type_name} of {self.declaring_type.__name__}.{self.constructor_name}"


class ConstructorDescriptor(BaseModel):
    """Value object describing one public way to construct an implementation.

    Attributes:
        implementation_type: The type the constructor produces.
        name: ``"__init__"`` for the primary constructor, else the classmethod name.
        factory: The callable that creates the instance.
        parameters: The injectable formal parameters, in declaration order.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    implementation_type: Type = Field(..., description="The type this constructor creates.")
    name: str = Field(default="__init__", description="Name of the constructor.")
    factory: Callable[..., Any] = Field(..., description="Callable that creates the instance.")
    parameters: Tuple[ParameterDescriptor, ...] = Field(
        default=(),
        description="Injectable formal parameters in declaration order.",
    )

    @property
    def parameter_count(self) -> int:
        return len(self.parameters)

    def __str__(self) -> str:
        arguments = ", ".join(parameter.name for parameter in self.parameters)
        if self.name == "__init__":
            return f"{self.implementation_type.__name__}({arguments})"
        return f"{self.implementation_type.__name__}.{self.name}({arguments})"


class KnownRelationship(BaseModel):
    """A dependency edge recorded while building a construction plan.

    Represents "this implementation, built under this lifestyle, depends on
    that registration". Frozen and hashable, so identical edges collapse.

    Attributes:
        implementation_type: The consuming implementation type.
        lifestyle: The lifestyle of the consumer.
        dependency: The registration producing the dependency.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    implementation_type: Type = Field(..., description="The consuming implementation type.")
    lifestyle: "ILifestyle" = Field(..., description="The lifestyle the consumer is built under.")
    dependency: "IRegistration" = Field(..., description="The registration producing the dependency.")


def type_name(service_type: Any) -> str:
    """Return a readable name for a type or type hint."""
    return getattr(service_type, "__name__", repr(service_type))
