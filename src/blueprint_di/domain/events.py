from typing import TYPE_CHECKING, Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from blueprint_di.domain.nodes import ConstructionNode

if TYPE_CHECKING:
    from blueprint_di.domain.interfaces import IRegistration


class ExpressionBuildingEventArgs(BaseModel):
    """Data offered to an interception handler before a plan is finalized.

    Attributes:
        registration: The registration building the plan.
        service_type: The service type being built.
        implementation_type: The implementation type being built.
        node: The construction node built so far.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    registration: "IRegistration" = Field(..., description="The registration building the plan.")
    service_type: Any = Field(..., description="The service type being built.")
    implementation_type: Any = Field(..., description="The implementation type being built.")
    node: ConstructionNode = Field(..., description="The construction node built so far.")


ExpressionBuildingHandler = Callable[[ExpressionBuildingEventArgs], Any]
