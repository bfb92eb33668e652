"""
cashbook_services -- Package init and public API.

Responsibility:
    Orchestration services that compose the kernel services with the
    loaded configuration.

Architecture position:
    Services -- orchestration over kernel + config.

    Dependency direction:
        cashbook_services/ -> cashbook_kernel/, cashbook_config/  (allowed)
        cashbook_kernel/   -> cashbook_services/                  (FORBIDDEN)
        cashbook_services/ -> cashbook_modules/                   (FORBIDDEN)
"""

from cashbook_services.transaction_service import TransactionService

__all__ = [
    "TransactionService",
]
