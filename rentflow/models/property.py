from ..extensions import db
from .base import OwnedMixin, new_id

PROPERTY_TYPES = ("apartment", "house", "condo", "townhouse")


class Property(db.Model, OwnedMixin):
    __tablename__ = "properties"
    label = "Property"
    __table_args__ = (
        db.CheckConstraint("occupied_units >= 0 AND occupied_units <= units", name="ck_properties_occupancy"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = db.Column(db.String(200), nullable=False)
    address = db.Column(db.String(512), nullable=False)
    city = db.Column(db.String(100), nullable=False)
    state = db.Column(db.String(50), nullable=False)
    zip_code = db.Column(db.String(20), nullable=False)
    type = db.Column(db.String(20), nullable=False)  # apartment, house, condo, townhouse

    units = db.Column(db.Integer, nullable=False, default=1)
    occupied_units = db.Column(db.Integer, nullable=False, default=0)
    monthly_rent = db.Column(db.Float, nullable=False)
    image_url = db.Column(db.String(500), nullable=True)

    def __repr__(self):
        return f"<Property {self.id}: {self.name}>"

    @property
    def vacant_units(self):
        return max(self.units - self.occupied_units, 0)

    def occupy(self):
        self.occupied_units = min(self.occupied_units + 1, self.units)

    def vacate(self):
        if self.occupied_units > 0:
            self.occupied_units -= 1

    @classmethod
    def names_for_user(cls, user_id):
        """Map property id -> name for one user's properties."""
        rows = db.session.query(cls.id, cls.name).filter(cls.user_id == user_id).all()
        return {row.id: row.name for row in rows}

    def serialize(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "type": self.type,
            "units": self.units,
            "occupiedUnits": self.occupied_units,
            "monthlyRent": self.monthly_rent,
            "imageUrl": self.image_url,
        }
