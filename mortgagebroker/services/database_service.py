"""Database service for leads and intakes"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mortgagebroker.models.database import Intake, Lead
from mortgagebroker.models.tools import IntakeRequest, LeadRequest
from mortgagebroker.utils.logger import LoggerMixin


def intake_record(intake: IntakeRequest, lead_id: Optional[str] = None) -> Intake:
    return Intake(
        lead_id=lead_id,
        purpose=intake.purpose,
        occupancy=intake.occupancy,
        property_type=intake.property_type,
        est_price=intake.est_price,
        est_down_payment=intake.est_down_payment,
    )


class LeadService(LoggerMixin):
    """Service for lead funnel persistence"""

    def __init__(self, db_session: Session):
        self.db = db_session

    def create_intake(
        self, intake: IntakeRequest, lead_id: Optional[str] = None
    ) -> Intake:
        """Persist loan preferences, optionally linked to a lead"""
        try:
            record = intake_record(intake, lead_id=lead_id)
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)

            self.logger.info(
                "Saved intake",
                intake_id=record.id,
                lead_id=lead_id,
                purpose=intake.purpose.value,
            )
            return record
        except SQLAlchemyError as e:
            self.db.rollback()
            self.logger.error("Failed to save intake", error=str(e))
            raise

    def create_lead(self, lead: LeadRequest) -> Lead:
        """Persist a consented lead and any intake submitted with it.

        Both rows are written in one transaction, so a failed intake
        leaves no lead behind.
        """
        try:
            record = Lead(
                full_name=lead.full_name,
                email=lead.email,
                phone=lead.phone,
                consent=lead.consent,
            )
            if lead.intake is not None:
                record.intakes.append(intake_record(lead.intake))
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)

            self.logger.info(
                "Saved lead", lead_id=record.id, has_intake=lead.intake is not None
            )
            return record
        except SQLAlchemyError as e:
            self.db.rollback()
            self.logger.error("Failed to save lead", error=str(e))
            raise
