"""
CoffeeProfile model: a customer's inferred taste profile.
"""
from datetime import datetime
from ..extensions import db, generate_id


class CoffeeProfile(db.Model):
    """
    One row per customer, written only by profile generation.

    Regeneration overwrites every field; nothing else mutates the row.
    Scalar preferences are on a 1.0-5.0 scale with one decimal.
    """
    __tablename__ = 'coffee_profiles'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    customer_id = db.Column(db.String(32), db.ForeignKey('customers.id'), nullable=False, unique=True)

    profile_type = db.Column(db.String(50), nullable=False)
    roast_preference = db.Column(db.Float, nullable=False)   # 1=light, 5=dark
    strength = db.Column(db.Float, nullable=False)
    milk_preference = db.Column(db.String(20), nullable=False)  # oat, none, dairy
    temperature = db.Column(db.Float, nullable=False)        # 1=iced, 5=hot
    sweetness = db.Column(db.Float, nullable=False)
    adventure_score = db.Column(db.Float, nullable=False)
    flavor_notes = db.Column(db.JSON, default=list)
    confidence = db.Column(db.Float, nullable=False)         # 0.5 - 0.95

    generated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<CoffeeProfile {self.customer_id}: {self.profile_type}>'

    def to_dict(self, include_customer=False):
        from ..services.profile_classifier import PROFILE_TYPES

        data = {
            'id': self.id,
            'customerId': self.customer_id,
            'profileType': self.profile_type,
            'profileDescription': PROFILE_TYPES.get(self.profile_type),
            'roastPreference': self.roast_preference,
            'strength': self.strength,
            'milkPreference': self.milk_preference,
            'temperature': self.temperature,
            'sweetness': self.sweetness,
            'adventureScore': self.adventure_score,
            'flavorNotes': list(self.flavor_notes or []),
            'confidence': self.confidence,
            'generatedAt': self.generated_at.isoformat() if self.generated_at else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_customer and self.customer:
            data['customer'] = {
                'id': self.customer.id,
                'name': self.customer.name,
                'email': self.customer.email,
            }
        return data
