"""
Shipment Service - Shipment lifecycle, multi-leg routing and stock movement
"""
import logging
import random
import string
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from datetime import datetime
from decimal import Decimal

from freightline.core import atomic
from freightline.core.exceptions import (
    NotFound, InvalidState, DuplicateEntry, InsufficientStock, DriverUnavailable
)
from freightline.models import (
    Shipment, ShipmentItem, ShipmentLeg, ShipmentStatus, LegStatus,
    Warehouse, Driver, DriverStatus, Product
)
from freightline.schemas.shipment import ShipmentCreate
from .stock_service import StockService

logger = logging.getLogger(__name__)

TRACKING_NUMBER_ATTEMPTS = 5

class ShipmentService:
    """Shipment business logic"""

    # Valid status transitions
    STATUS_TRANSITIONS = {
        ShipmentStatus.PENDING.value: [ShipmentStatus.QUEUED.value, ShipmentStatus.CANCELLED.value],
        ShipmentStatus.QUEUED.value: [ShipmentStatus.LOADING.value, ShipmentStatus.PENDING.value, ShipmentStatus.CANCELLED.value],
        ShipmentStatus.LOADING.value: [ShipmentStatus.IN_TRANSIT.value, ShipmentStatus.CANCELLED.value],
        ShipmentStatus.IN_TRANSIT.value: [ShipmentStatus.AT_WAREHOUSE.value, ShipmentStatus.DELIVERED.value, ShipmentStatus.CANCELLED.value],
        ShipmentStatus.AT_WAREHOUSE.value: [
            ShipmentStatus.QUEUED.value, ShipmentStatus.IN_TRANSIT.value,
            ShipmentStatus.DELIVERED.value, ShipmentStatus.CANCELLED.value
        ],
        ShipmentStatus.DELIVERED.value: [],
        ShipmentStatus.CANCELLED.value: [],
    }

    LEG_TRANSITIONS = {
        LegStatus.PENDING.value: [LegStatus.IN_TRANSIT.value],
        LegStatus.IN_TRANSIT.value: [LegStatus.ARRIVED.value],
        LegStatus.ARRIVED.value: [LegStatus.UNLOADED.value],
        LegStatus.UNLOADED.value: [LegStatus.COMPLETED.value],
        LegStatus.COMPLETED.value: [],
    }

    # ===================== Lookups =====================

    @staticmethod
    def get_shipments(
        db: Session,
        status: Optional[str] = None,
        driver_id: Optional[UUID] = None
    ) -> List[Shipment]:
        """List shipments, newest first"""
        query = db.query(Shipment)

        if status:
            query = query.filter(Shipment.status == status)

        if driver_id:
            query = query.filter(Shipment.driver_id == driver_id)

        return query.order_by(Shipment.created_at.desc()).all()

    @staticmethod
    def get_shipment_by_id(db: Session, shipment_id: UUID, for_update: bool = False) -> Shipment:
        query = db.query(Shipment).filter(Shipment.id == shipment_id)
        if for_update:
            query = query.with_for_update()
        shipment = query.first()
        if not shipment:
            raise NotFound("Shipment", shipment_id)
        return shipment

    @staticmethod
    def get_shipment_by_tracking_number(db: Session, tracking_number: str) -> Shipment:
        shipment = db.query(Shipment).filter(Shipment.tracking_number == tracking_number).first()
        if not shipment:
            raise NotFound("Shipment", tracking_number, f"Shipment with tracking number {tracking_number} not found")
        return shipment

    # ===================== Creation =====================

    @staticmethod
    def generate_tracking_number(db: Session) -> str:
        """
        TRK-{epoch ms}-{9 random chars}.
        Re-rolls on collision with an existing shipment; the unique index
        on tracking_number still guards against a concurrent insert.
        """
        alphabet = string.ascii_uppercase + string.digits
        for _ in range(TRACKING_NUMBER_ATTEMPTS):
            millis = int(datetime.now().timestamp() * 1000)
            suffix = "".join(random.choices(alphabet, k=9))
            tracking_number = f"TRK-{millis}-{suffix}"
            exists = db.query(Shipment.id).filter(Shipment.tracking_number == tracking_number).first()
            if not exists:
                return tracking_number
        raise DuplicateEntry(f"Could not generate a unique tracking number after {TRACKING_NUMBER_ATTEMPTS} attempts")

    @staticmethod
    def create_shipment(db: Session, shipment_data: ShipmentCreate) -> Shipment:
        """
        Create a shipment with its items and legs, reserving origin stock
        for every item. Nothing is written unless every item can be reserved.
        """
        with atomic(db):
            origin_id = shipment_data.origin_warehouse_id
            if not db.get(Warehouse, origin_id):
                raise NotFound("Origin warehouse", origin_id)

            destination_id = shipment_data.destination_warehouse_id
            if destination_id and not db.get(Warehouse, destination_id):
                raise NotFound("Destination warehouse", destination_id)

            if shipment_data.driver_id and not db.get(Driver, shipment_data.driver_id):
                raise NotFound("Driver", shipment_data.driver_id)

            legs = shipment_data.legs or []
            sequences = set()
            for leg_data in legs:
                if leg_data.sequence in sequences:
                    raise DuplicateEntry(f"Leg sequence {leg_data.sequence} appears more than once")
                sequences.add(leg_data.sequence)

                for warehouse_id in (leg_data.from_warehouse_id, leg_data.to_warehouse_id):
                    if not db.get(Warehouse, warehouse_id):
                        raise NotFound("Leg warehouse", warehouse_id)

            # Verify products and stock, calculate totals
            total_value = Decimal("0")
            total_weight = 0
            lines = []
            for item_data in shipment_data.items:
                product = db.get(Product, item_data.product_id)
                if not product:
                    raise NotFound("Product", item_data.product_id)

                stock = StockService.get_stock(db, product.id, origin_id)
                available = stock.available_quantity if stock else 0
                if available < item_data.quantity:
                    raise InsufficientStock(
                        f"Insufficient stock for product {product.name}. "
                        f"Available: {available}, Requested: {item_data.quantity}",
                        available=available,
                        requested=item_data.quantity
                    )

                unit_price = Decimal(str(product.unit_price))
                total_value += unit_price * item_data.quantity
                total_weight += item_data.quantity
                lines.append((product, item_data.quantity, unit_price))

            shipment = Shipment(
                tracking_number=ShipmentService.generate_tracking_number(db),
                origin_warehouse_id=origin_id,
                destination_warehouse_id=destination_id,
                driver_id=shipment_data.driver_id,
                status=ShipmentStatus.PENDING.value,
                destination_address=shipment_data.destination_address,
                recipient_name=shipment_data.recipient_name,
                recipient_phone=shipment_data.recipient_phone,
                total_value=total_value,
                total_weight=total_weight,
                scheduled_pickup_date=shipment_data.scheduled_pickup_date,
                scheduled_delivery_date=shipment_data.scheduled_delivery_date,
                is_multi_leg=bool(shipment_data.is_multi_leg or legs)
            )

            for product, quantity, unit_price in lines:
                shipment.items.append(ShipmentItem(
                    product_id=product.id,
                    quantity=quantity,
                    unit_price=unit_price,
                    total_price=unit_price * quantity
                ))
                StockService.reserve(db, product.id, origin_id, quantity)

            for leg_data in legs:
                shipment.legs.append(ShipmentLeg(
                    sequence=leg_data.sequence,
                    from_warehouse_id=leg_data.from_warehouse_id,
                    to_warehouse_id=leg_data.to_warehouse_id,
                    status=LegStatus.PENDING.value,
                    scheduled_departure_date=leg_data.scheduled_departure_date,
                    scheduled_arrival_date=leg_data.scheduled_arrival_date,
                    distance=leg_data.distance
                ))

            db.add(shipment)

        db.refresh(shipment)
        logger.info(
            f"Created shipment {shipment.tracking_number}: {len(lines)} items, "
            f"{len(legs)} legs, value={shipment.total_value}"
        )
        return shipment

    # ===================== Status transitions =====================

    @staticmethod
    def can_transition(current: str, target: str) -> bool:
        if current == target:
            return True
        return target in ShipmentService.STATUS_TRANSITIONS.get(current, [])

    @staticmethod
    def apply_status(db: Session, shipment: Shipment, status: str, now: Optional[datetime] = None) -> Shipment:
        """
        Set a shipment's status and its side effects without checking the
        transition table. Callers validate first (or deliberately don't).
        Does not commit.
        """
        now = now or datetime.now()
        shipment.status = status

        if status == ShipmentStatus.LOADING.value and not shipment.actual_pickup_date:
            shipment.actual_pickup_date = now

        if status == ShipmentStatus.DELIVERED.value and not shipment.actual_delivery_date:
            shipment.actual_delivery_date = now

        # Moving into transit starts the first leg
        if status == ShipmentStatus.IN_TRANSIT.value and shipment.is_multi_leg:
            first_leg = next((l for l in shipment.legs if l.sequence == 1), None)
            if first_leg and first_leg.status == LegStatus.PENDING.value:
                first_leg.status = LegStatus.IN_TRANSIT.value
                first_leg.actual_departure_date = now

        return shipment

    @staticmethod
    def transition(db: Session, shipment: Shipment, status: str, now: Optional[datetime] = None) -> Shipment:
        """Validated transition. Does not commit."""
        if not ShipmentService.can_transition(shipment.status, status):
            raise InvalidState(
                f"Shipment {shipment.tracking_number} cannot transition from {shipment.status} to {status}"
            )
        return ShipmentService.apply_status(db, shipment, status, now)

    @staticmethod
    def update_status(db: Session, shipment_id: UUID, status: str) -> Shipment:
        """Update shipment status with validation"""
        status = ShipmentStatus(status).value
        with atomic(db):
            shipment = ShipmentService.get_shipment_by_id(db, shipment_id, for_update=True)
            old_status = shipment.status
            ShipmentService.transition(db, shipment, status)

        db.refresh(shipment)
        logger.info(f"Shipment {shipment.tracking_number}: {old_status} -> {status}")
        return shipment

    @staticmethod
    def override_status(db: Session, shipment_id: UUID, status: str) -> Shipment:
        """
        Force a status with no transition check. This is an operator
        escape hatch for correcting records, not part of the normal flow.
        """
        status = ShipmentStatus(status).value
        with atomic(db):
            shipment = ShipmentService.get_shipment_by_id(db, shipment_id, for_update=True)
            old_status = shipment.status
            ShipmentService.apply_status(db, shipment, status)

        db.refresh(shipment)
        logger.warning(f"Shipment {shipment.tracking_number} status overridden: {old_status} -> {status}")
        return shipment

    # ===================== Legs =====================

    @staticmethod
    def update_leg_status(db: Session, shipment_id: UUID, sequence: int, status: str) -> ShipmentLeg:
        """
        Move one leg through its state machine. Completing a leg starts the
        next one, or delivers the shipment when it was the last leg.
        """
        status = LegStatus(status).value
        with atomic(db):
            leg = db.query(ShipmentLeg).filter(
                ShipmentLeg.shipment_id == shipment_id,
                ShipmentLeg.sequence == sequence
            ).with_for_update().first()

            if not leg:
                raise NotFound("ShipmentLeg", sequence, f"Leg {sequence} not found for shipment {shipment_id}")

            if leg.status == status:
                # Repeated transition, nothing to stamp
                return leg

            if status not in ShipmentService.LEG_TRANSITIONS.get(leg.status, []):
                raise InvalidState(
                    f"Leg {sequence} of shipment {shipment_id} cannot transition from {leg.status} to {status}"
                )

            now = datetime.now()
            leg.status = status

            if status == LegStatus.IN_TRANSIT.value and not leg.actual_departure_date:
                leg.actual_departure_date = now

            if status == LegStatus.ARRIVED.value and not leg.actual_arrival_date:
                leg.actual_arrival_date = now

            if status == LegStatus.UNLOADED.value and not leg.unloaded_date:
                leg.unloaded_date = now

            if status == LegStatus.COMPLETED.value:
                next_leg = db.query(ShipmentLeg).filter(
                    ShipmentLeg.shipment_id == shipment_id,
                    ShipmentLeg.sequence == sequence + 1
                ).with_for_update().first()

                if next_leg:
                    if next_leg.status == LegStatus.PENDING.value:
                        next_leg.status = LegStatus.IN_TRANSIT.value
                        next_leg.actual_departure_date = now
                else:
                    shipment = ShipmentService.get_shipment_by_id(db, shipment_id, for_update=True)
                    ShipmentService.transition(db, shipment, ShipmentStatus.DELIVERED.value, now)
                    logger.info(f"Shipment {shipment.tracking_number} delivered on completion of leg {sequence}")

        db.refresh(leg)
        logger.info(f"Shipment {shipment_id} leg {sequence} -> {status}")
        return leg

    # ===================== Driver =====================

    @staticmethod
    def assign_driver(db: Session, shipment_id: UUID, driver_id: UUID) -> Shipment:
        with atomic(db):
            shipment = ShipmentService.get_shipment_by_id(db, shipment_id, for_update=True)

            driver = db.query(Driver).filter(Driver.id == driver_id).with_for_update().first()
            if not driver:
                raise NotFound("Driver", driver_id)

            if driver.status != DriverStatus.AVAILABLE.value:
                raise DriverUnavailable(
                    f"Driver {driver.full_name} is not available (status: {driver.status})"
                )

            shipment.driver_id = driver.id
            driver.status = DriverStatus.ON_ROUTE.value

        db.refresh(shipment)
        logger.info(f"Assigned driver {driver_id} to shipment {shipment.tracking_number}")
        return shipment

    # ===================== Stock transfer =====================

    @staticmethod
    def unload_at_warehouse(db: Session, shipment_id: UUID, warehouse_id: UUID) -> Shipment:
        """
        Move the shipment's goods from the origin warehouse into another
        warehouse: consume the reservation at the origin and receive the same
        quantity at the target, for every item, as one unit.
        """
        with atomic(db):
            shipment = ShipmentService.get_shipment_by_id(db, shipment_id, for_update=True)

            if not db.get(Warehouse, warehouse_id):
                raise NotFound("Warehouse", warehouse_id)

            for item in shipment.items:
                StockService.consume(db, item.product_id, shipment.origin_warehouse_id, item.quantity)
                StockService.receive(db, item.product_id, warehouse_id, item.quantity)

        db.refresh(shipment)
        logger.info(
            f"Unloaded shipment {shipment.tracking_number} at warehouse {warehouse_id} "
            f"({len(shipment.items)} items)"
        )
        return shipment
