from datetime import datetime

from ..extensions import db
from .base import OwnedMixin, iso, new_id

PRIORITIES = ("low", "medium", "high", "urgent")
MAINTENANCE_STATUSES = ("new", "in_progress", "completed")
CATEGORIES = ("plumbing", "electrical", "hvac", "appliance", "structural", "pest", "other")


class MaintenanceRequest(db.Model, OwnedMixin):
    __tablename__ = "maintenance_requests"
    label = "Maintenance request"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    property_id = db.Column(db.String(36), nullable=False, index=True)
    tenant_id = db.Column(db.String(36), nullable=True, index=True)

    # Request Information
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(50), nullable=False)  # plumbing, electrical, hvac, appliance, ...
    priority = db.Column(db.String(20), nullable=False, default="medium")  # low, medium, high, urgent

    # Status and Assignment
    status = db.Column(db.String(32), nullable=False, default="new")  # new, in_progress, completed
    assigned_to = db.Column(db.String(200), nullable=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=True)

    def __repr__(self):
        return f"<MaintenanceRequest {self.id}: {self.title} - {self.status}>"

    @property
    def is_open(self):
        return self.status != "completed"

    def set_status(self, status):
        """Change status, keeping `completed_at` in step with it."""
        if status == "completed" and self.status != "completed":
            self.completed_at = datetime.utcnow()
        elif status != "completed":
            self.completed_at = None
        self.status = status

    def serialize(self, property_name=None, tenant_name=None):
        data = {
            "id": self.id,
            "userId": self.user_id,
            "propertyId": self.property_id,
            "tenantId": self.tenant_id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "priority": self.priority,
            "status": self.status,
            "assignedTo": self.assigned_to,
            "createdAt": iso(self.created_at),
            "completedAt": iso(self.completed_at),
        }
        if property_name is not None:
            data["propertyName"] = property_name
        if tenant_name is not None:
            data["tenantName"] = tenant_name
        return data
