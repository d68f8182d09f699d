from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from blueprint_di.domain import IConstructorResolutionBehavior, IParameterResolutionBehavior


class ContainerOptions(BaseModel):
    """Configuration of a container.

    Installing a custom resolution behavior changes how constructors are
    selected and how their parameters are resolved, for every registration
    built afterwards.

    Attributes:
        constructor_resolution_behavior: Policy selecting the constructor of an implementation.
        parameter_resolution_behavior: Policy building the node for a constructor parameter.
        compile_factories: Generate code for factories instead of interpreting plans.
        allow_auto_wiring: Build unregistered concrete classes on demand.
        allow_overriding_registrations: Replace existing registrations instead of failing.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    constructor_resolution_behavior: Optional[IConstructorResolutionBehavior] = Field(
        default=None,
        description="Policy selecting the constructor of an implementation.",
    )
    parameter_resolution_behavior: Optional[IParameterResolutionBehavior] = Field(
        default=None,
        description="Policy building the construction node for a constructor parameter.",
    )
    compile_factories: bool = Field(
        default=True,
        description="Generate code for factories instead of interpreting construction plans.",
    )
    allow_auto_wiring: bool = Field(
        default=True,
        description="Build unregistered concrete classes through their constructor on demand.",
    )
    allow_overriding_registrations: bool = Field(
        default=False,
        description="Let a new registration replace an existing one for the same service type.",
    )
