"""
Management command to populate the database with demo data.
"""
import random
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from reminders.models import ConsumptionRecord, Doctor, Medication, MedicationSchedule, Patient
from reminders.services.records import derive_status


MEDICATIONS = [
    {'name': 'Metformin', 'dosage': '500mg', 'frequency': '2x sehari', 'instructions': 'Diminum setelah makan',
     'side_effects': ['Mual', 'Diare', 'Perut kembung'], 'category': 'Antidiabetes', 'stock_quantity': 200},
    {'name': 'Lisinopril', 'dosage': '10mg', 'frequency': '1x sehari', 'instructions': 'Diminum sebelum makan',
     'side_effects': ['Batuk kering', 'Pusing'], 'category': 'Antihipertensi', 'stock_quantity': 150},
    {'name': 'Vitamin D3', 'dosage': '1000 IU', 'frequency': '1x sehari', 'instructions': 'Diminum setelah makan',
     'side_effects': ['Minimal'], 'category': 'Vitamin', 'stock_quantity': 300},
    {'name': 'Amoxicillin', 'dosage': '500mg', 'frequency': '3x sehari', 'instructions': 'Diminum setiap 8 jam',
     'side_effects': ['Mual', 'Ruam kulit', 'Diare'], 'category': 'Antibiotik', 'stock_quantity': 120},
    {'name': 'Paracetamol', 'dosage': '500mg', 'frequency': 'Bila perlu', 'instructions': 'Untuk demam dan nyeri',
     'side_effects': ['Jarang'], 'category': 'Analgesik', 'stock_quantity': 500},
]

DOCTORS = [
    {'name': 'Dr. Michael Chen', 'email': 'michael.chen@hospital.com', 'specialization': 'Penyakit Dalam',
     'license_number': 'STR-12345678', 'phone': '+62 21 9876 5432'},
    {'name': 'Dr. Sarah Wilson', 'email': 'sarah.wilson@hospital.com', 'specialization': 'Kardiologi',
     'license_number': 'STR-87654321', 'phone': '+62 21 5432 9876'},
    {'name': 'Dr. Ahmad Rahman', 'email': 'ahmad.rahman@hospital.com', 'specialization': 'Endokrinologi',
     'license_number': 'STR-11223344', 'phone': '+62 21 1122 3344'},
    {'name': 'Dr. Sari Dewi', 'email': 'sari.dewi@hospital.com', 'specialization': 'Neurologi',
     'license_number': 'STR-55667788', 'phone': '+62 21 5566 7788'},
    {'name': 'Dr. Budi Santoso', 'email': 'budi.santoso@hospital.com', 'specialization': 'Ortopedi',
     'license_number': 'STR-99887766', 'phone': '+62 21 9988 7766'},
]

# (name, age, gender, email, phone, address, conditions, doctor index, contact, allergies, blood, weight, height)
PATIENTS = [
    ('John Smith', 45, 'Laki-laki', 'john.smith@email.com', '+62 812 3456 7890', 'Jl. Sudirman No. 123, Jakarta',
     ['Hipertensi', 'Diabetes Tipe 2'], 0, ('Jane Smith', '+62 812 9876 5432', 'Istri'), ['Penisilin'], 'O+', 75, 170),
    ('Maria Garcia', 38, 'Perempuan', 'maria.garcia@email.com', '+62 813 2468 1357', 'Jl. Thamrin No. 456, Jakarta',
     ['Diabetes Tipe 1'], 1, ('Carlos Garcia', '+62 813 1357 2468', 'Suami'), ['Sulfa'], 'A+', 65, 165),
    ('Robert Johnson', 62, 'Laki-laki', 'robert.johnson@email.com', '+62 814 9876 5432',
     'Jl. Gatot Subroto No. 789, Jakarta', ['Penyakit Jantung Koroner', 'Hipertensi'], 0,
     ('Mary Johnson', '+62 814 5432 9876', 'Istri'), ['Aspirin'], 'B+', 80, 175),
    ('Lisa Anderson', 29, 'Perempuan', 'lisa.anderson@email.com', '+62 815 1234 5678', 'Jl. Kuningan No. 321, Jakarta',
     ['Asma'], 1, ('Mike Anderson', '+62 815 8765 4321', 'Suami'), ['Debu', 'Bulu kucing'], 'AB+', 60, 160),
    ('Ahmad Wijaya', 55, 'Laki-laki', 'ahmad.wijaya@email.com', '+62 816 2468 1357', 'Jl. Kemang No. 654, Jakarta',
     ['Kolesterol Tinggi', 'Hipertensi'], 0, ('Siti Wijaya', '+62 816 1357 2468', 'Istri'), ['Tidak ada'], 'O-', 78, 168),
]

# (patient index, medication index, times, instructions)
SCHEDULES = [
    (0, 0, ['08:00', '20:00'], 'Diminum setelah makan'),
    (0, 1, ['12:00'], 'Diminum sebelum makan siang'),
    (0, 2, ['14:30'], 'Diminum setelah makan siang'),
    (1, 0, ['07:00', '19:00'], 'Diminum setelah makan'),
    (2, 1, ['08:00'], 'Diminum sebelum sarapan'),
    (3, 4, ['09:00'], 'Bila sesak napas'),
    (4, 1, ['06:30'], 'Diminum sebelum sarapan'),
]


class Command(BaseCommand):
    help = 'Populate database with demo data'

    def add_arguments(self, parser):
        parser.add_argument('--days', type=int, default=7, help='days of consumption history to generate')
        parser.add_argument('--seed', type=int, default=42)

    def handle(self, *args, **options):
        self.stdout.write('Creating demo data...')
        rng = random.Random(options['seed'])
        medications = self.create_medications()
        doctors = self.create_doctors()
        patients = self.create_patients(doctors)
        schedules = self.create_schedules(patients, medications, doctors)
        self.create_records(schedules, options['days'], rng)
        self.stdout.write(self.style.SUCCESS('Demo data created.'))

    def create_medications(self):
        medications = []
        for data in MEDICATIONS:
            med, _ = Medication.objects.get_or_create(name=data['name'], dosage=data['dosage'], defaults=data)
            medications.append(med)
            self.stdout.write(f'Medication: {med}')
        return medications

    def create_doctors(self):
        doctors = []
        for data in DOCTORS:
            doctor, _ = Doctor.objects.get_or_create(name=data['name'], defaults=data)
            doctors.append(doctor)
            self.stdout.write(f'Doctor: {doctor}')
        return doctors

    def create_patients(self, doctors):
        patients = []
        for (name, age, gender, email, phone, address, conditions, doc_idx,
             contact, allergies, blood, weight, height) in PATIENTS:
            doctor = doctors[doc_idx]
            patient, _ = Patient.objects.get_or_create(
                email=email,
                defaults={
                    'name': name, 'age': age, 'gender': gender, 'phone': phone, 'address': address,
                    'medical_conditions': conditions, 'allergies': allergies,
                    'doctor': doctor, 'doctor_name': doctor.name,
                    'emergency_contact_name': contact[0], 'emergency_contact_phone': contact[1],
                    'emergency_contact_relationship': contact[2],
                    'blood_type': blood, 'weight': weight, 'height': height,
                },
            )
            patients.append(patient)
            self.stdout.write(f'Patient: {patient}')
        return patients

    def create_schedules(self, patients, medications, doctors):
        today = timezone.localdate()
        schedules = []
        for p_idx, m_idx, times, instructions in SCHEDULES:
            patient, med = patients[p_idx], medications[m_idx]
            doctor = patient.doctor or doctors[0]
            schedule, _ = MedicationSchedule.objects.get_or_create(
                patient=patient,
                medication=med,
                defaults={
                    'medication_name': med.name, 'dosage': med.dosage, 'times': times,
                    'start_date': today - timedelta(days=30), 'end_date': today + timedelta(days=150),
                    'instructions': instructions, 'prescribed_by': doctor, 'prescribed_by_name': doctor.name,
                },
            )
            schedules.append(schedule)
        self.stdout.write(f'{len(schedules)} schedules ready')
        return schedules

    def create_records(self, schedules, days, rng):
        today = timezone.localdate()
        created = 0
        for schedule in schedules:
            for offset in range(days, 0, -1):
                day = today - timedelta(days=offset)
                for t in schedule.times:
                    if ConsumptionRecord.objects.filter(schedule=schedule, date=day, scheduled_time=t).exists():
                        continue
                    roll = rng.random()
                    if roll < 0.15:
                        actual = None
                    else:
                        hours, minutes = map(int, t.split(':'))
                        delay = rng.choice([0, 5, 10, 20, 45, 90]) if roll < 0.9 else 0
                        total = min(hours * 60 + minutes + delay, 23 * 60 + 59)
                        actual = f'{total // 60:02d}:{total % 60:02d}'
                    ConsumptionRecord.objects.create(
                        patient=schedule.patient, schedule=schedule, medication_name=schedule.medication_name,
                        date=day, scheduled_time=t, actual_time=actual,
                        status=derive_status(t, actual),
                    )
                    created += 1
        self.stdout.write(f'{created} consumption records created')
