"""Abstract interfaces for suppliers and vendors."""

from abc import ABC, abstractmethod

from src.core.entities.movement import MovementRecord
from src.core.entities.partner import Supplier, Vendor


class ISupplierStore(ABC):
    """Interface for supplier persistence."""

    @abstractmethod
    async def create_supplier(self, supplier: Supplier) -> Supplier:
        pass

    @abstractmethod
    async def get_supplier(self, supplier_id: int) -> Supplier | None:
        pass

    @abstractmethod
    async def list_suppliers(self, search: str | None = None) -> list[Supplier]:
        """List suppliers, optionally matching name / contact / email."""
        pass

    @abstractmethod
    async def update_supplier(self, supplier: Supplier) -> Supplier:
        pass

    @abstractmethod
    async def delete_supplier(self, supplier_id: int) -> bool:
        """Delete supplier; products keep existing with supplier_id NULL."""
        pass


class IVendorStore(ABC):
    """Interface for vendor persistence."""

    @abstractmethod
    async def create_vendor(self, vendor: Vendor) -> Vendor:
        pass

    @abstractmethod
    async def get_vendor(self, vendor_id: int) -> Vendor | None:
        pass

    @abstractmethod
    async def list_vendors(self, search: str | None = None) -> list[Vendor]:
        """List vendors, optionally matching name / phone."""
        pass

    @abstractmethod
    async def update_vendor(self, vendor: Vendor) -> Vendor:
        pass

    @abstractmethod
    async def delete_vendor(self, vendor_id: int) -> bool:
        """Delete vendor; movements keep existing with vendor_id NULL."""
        pass

    @abstractmethod
    async def list_purchases(self, vendor_id: int) -> list[MovementRecord]:
        """Entry movements bought from this vendor, newest first."""
        pass
