from reminders.models import Medication


def format_medication(m: Medication) -> dict:
    return {
        'id': m.id,
        'name': m.name,
        'dosage': m.dosage,
        'frequency': m.frequency,
        'instructions': m.instructions,
        'sideEffects': list(m.side_effects or []),
        'category': m.category,
        'manufacturer': m.manufacturer,
        'expiryDate': m.expiry_date.isoformat() if m.expiry_date else None,
        'stockQuantity': m.stock_quantity,
        'isActive': m.is_active,
    }


def apply_medication_fields(medication: Medication, data: dict) -> Medication:
    for key, attr in (('name', 'name'), ('dosage', 'dosage'), ('frequency', 'frequency'),
                      ('instructions', 'instructions'), ('sideEffects', 'side_effects'),
                      ('category', 'category'), ('manufacturer', 'manufacturer'),
                      ('expiryDate', 'expiry_date'), ('stockQuantity', 'stock_quantity')):
        if key in data:
            setattr(medication, attr, data[key])
    return medication
