from .unit_of_work import (
    ProvisioningUnitOfWork,
    SqlAlchemyUnitOfWork,
    provisioning_unit_of_work_factory,
    unit_of_work_factory,
)

__all__ = [
    "ProvisioningUnitOfWork",
    "SqlAlchemyUnitOfWork",
    "provisioning_unit_of_work_factory",
    "unit_of_work_factory",
]
