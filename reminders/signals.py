"""
Realtime change notifications.

Every write to a watched model is announced on the ``updates`` group
once the surrounding transaction commits, so listening clients can
reload the affected collection.
"""
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import ConsumptionRecord, Doctor, Medication, MedicationSchedule, Patient
from .services.broadcast import broadcast_change

COLLECTIONS = {
    Patient: 'patients',
    Doctor: 'doctors',
    Medication: 'medications',
    MedicationSchedule: 'schedules',
    ConsumptionRecord: 'consumptionRecords',
}


def _announce(sender, instance, action):
    collection = COLLECTIONS[sender]
    object_id = instance.pk
    transaction.on_commit(lambda: broadcast_change(collection, action, object_id))


@receiver(post_save)
def announce_save(sender, instance, created, raw=False, **kwargs):
    if raw or sender not in COLLECTIONS:
        return
    _announce(sender, instance, 'created' if created else 'updated')


@receiver(post_delete)
def announce_delete(sender, instance, **kwargs):
    if sender not in COLLECTIONS:
        return
    _announce(sender, instance, 'deleted')
