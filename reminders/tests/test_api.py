"""
Integration tests for the medication reminder API.

These tests exercise role gating, the CRUD endpoints, soft and hard
deletes, search and the consumption history using Django REST
framework's APIClient within the APITestCase base class.

To run the tests:

```
pytest -q reminders/tests
```
"""
from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from ..models import ConsumptionRecord, Doctor, Medication, MedicationSchedule, Patient, User


class ReminderAPITests(APITestCase):
    def setUp(self) -> None:
        """Set up an admin, two doctors with one patient each and a schedule."""
        self.today = timezone.localdate()
        self.admin_user = User.objects.create_user(
            username="admin@example.com", email="admin@example.com", password="adminpass", role="admin",
        )
        self.doctor_user = User.objects.create_user(
            username="chen@example.com", email="chen@example.com", password="doctorpass", role="doctor",
            name="Dr. Michael Chen",
        )
        self.doctor = Doctor.objects.create(
            user=self.doctor_user, name="Dr. Michael Chen", email="chen@example.com",
            specialization="Penyakit Dalam", license_number="STR-12345678",
        )
        self.other_doctor = Doctor.objects.create(
            name="Dr. Sarah Wilson", email="wilson@example.com", specialization="Kardiologi",
            license_number="STR-87654321",
        )
        self.patient_user = User.objects.create_user(
            username="john@example.com", email="john@example.com", password="patientpass", role="patient",
            name="John Smith",
        )
        self.patient = Patient.objects.create(
            user=self.patient_user, name="John Smith", email="john@example.com", age=45, gender="Laki-laki",
            medical_conditions=["Hipertensi", "Diabetes Tipe 2"], doctor=self.doctor, doctor_name=self.doctor.name,
        )
        self.other_patient = Patient.objects.create(
            name="Maria Garcia", email="maria@example.com", age=38, gender="Perempuan",
            medical_conditions=["Diabetes Tipe 1"], doctor=self.other_doctor, doctor_name=self.other_doctor.name,
        )
        self.medication = Medication.objects.create(
            name="Metformin", dosage="500mg", frequency="2x sehari", category="Antidiabetes",
        )
        self.schedule = MedicationSchedule.objects.create(
            patient=self.patient, medication=self.medication, medication_name="Metformin", dosage="500mg",
            times=["08:00", "20:00"], start_date=self.today - timedelta(days=7),
            end_date=self.today + timedelta(days=30), prescribed_by=self.doctor,
            prescribed_by_name=self.doctor.name,
        )

        self.admin_client = APIClient()
        self.admin_client.force_authenticate(user=self.admin_user)
        self.doctor_client = APIClient()
        self.doctor_client.force_authenticate(user=self.doctor_user)
        self.patient_client = APIClient()
        self.patient_client.force_authenticate(user=self.patient_user)

    # ------------------------------------------------------------------
    # Role gating
    # ------------------------------------------------------------------
    def test_anonymous_requests_are_rejected(self) -> None:
        resp = APIClient().get(reverse("patients"))
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data["ok"])

    def test_patient_cannot_list_all_patients(self) -> None:
        resp = self.patient_client.get(reverse("patients"))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.data["error"]["code"], "permission-denied")

    def test_doctor_sees_only_own_patients(self) -> None:
        resp = self.doctor_client.get(reverse("patients"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        ids = [p["id"] for p in resp.data["data"]]
        self.assertEqual(ids, [self.patient.id])
        other = self.doctor_client.get(reverse("patient_detail", args=[self.other_patient.id]))
        self.assertEqual(other.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_sees_all_patients_with_pagination(self) -> None:
        resp = self.admin_client.get(reverse("patients"), {"page": 1, "pageSize": 1})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["pagination"], {"total": 2, "page": 1, "pageSize": 1})
        self.assertEqual(len(resp.data["data"]), 1)

    def test_page_size_is_capped(self) -> None:
        resp = self.admin_client.get(reverse("patients"), {"pageSize": 10_000})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_patient_reads_own_record_only(self) -> None:
        own = self.patient_client.get(reverse("patient_detail", args=[self.patient.id]))
        self.assertEqual(own.status_code, status.HTTP_200_OK)
        self.assertEqual(own.data["data"]["emergencyContact"]["name"], "")
        other = self.patient_client.get(reverse("patient_detail", args=[self.other_patient.id]))
        self.assertEqual(other.status_code, status.HTTP_403_FORBIDDEN)

    def test_missing_patient_is_404(self) -> None:
        resp = self.admin_client.get(reverse("patient_detail", args=[9999]))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["code"], "not-found")

    # ------------------------------------------------------------------
    # Patients
    # ------------------------------------------------------------------
    def test_admin_creates_patient_with_emergency_contact(self) -> None:
        payload = {
            "name": "Lisa Anderson", "age": 29, "gender": "Perempuan", "email": "lisa@example.com",
            "medicalConditions": ["Asma"], "allergies": ["Debu"], "doctorId": self.other_doctor.id,
            "emergencyContact": {"name": "Mike Anderson", "phone": "+62 815", "relationship": "Suami"},
            "bloodType": "AB+", "weight": 60, "height": 160,
        }
        resp = self.admin_client.post(reverse("patients"), payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        data = resp.data["data"]
        self.assertEqual(data["doctorName"], "Dr. Sarah Wilson")
        self.assertEqual(data["emergencyContact"]["relationship"], "Suami")
        self.assertTrue(Patient.objects.filter(email="lisa@example.com", blood_type="AB+").exists())

    def test_doctor_registers_patient_assigned_to_self(self) -> None:
        payload = {"name": "Ahmad Wijaya", "doctorId": self.other_doctor.id}
        resp = self.doctor_client.post(reverse("patients"), payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["data"]["doctorId"], self.doctor.id)

    def test_patient_cannot_create_patients(self) -> None:
        resp = self.patient_client.post(reverse("patients"), {"name": "X"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_invalid_gender_is_rejected(self) -> None:
        resp = self.admin_client.post(reverse("patients"), {"name": "X", "gender": "M"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["error"]["code"], "validation_error")

    def test_doctor_updates_own_patient_but_cannot_reassign(self) -> None:
        url = reverse("patient_update", args=[self.patient.id])
        resp = self.doctor_client.post(url, {"age": 46, "doctorId": self.other_doctor.id}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.patient.refresh_from_db()
        self.assertEqual(self.patient.age, 46)
        self.assertEqual(self.patient.doctor_id, self.doctor.id)

    def test_soft_delete_keeps_patient_but_hides_it(self) -> None:
        resp = self.admin_client.post(reverse("patient_delete", args=[self.other_patient.id]), {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(Patient.objects.filter(id=self.other_patient.id, is_active=False).exists())
        listed = self.admin_client.get(reverse("patients"))
        self.assertNotIn(self.other_patient.id, [p["id"] for p in listed.data["data"]])
        with_inactive = self.admin_client.get(reverse("patients"), {"includeInactive": "true"})
        self.assertIn(self.other_patient.id, [p["id"] for p in with_inactive.data["data"]])

    def test_hard_delete_removes_patient_schedules_and_records(self) -> None:
        ConsumptionRecord.objects.create(
            patient=self.patient, schedule=self.schedule, medication_name="Metformin",
            date=self.today, scheduled_time="08:00", status="taken",
        )
        resp = self.admin_client.post(
            reverse("patient_delete", args=[self.patient.id]), {"hard": True}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(Patient.objects.filter(id=self.patient.id).exists())
        self.assertFalse(MedicationSchedule.objects.filter(patient_id=self.patient.id).exists())
        self.assertFalse(ConsumptionRecord.objects.filter(patient_id=self.patient.id).exists())

    def test_hard_delete_removes_schedule_and_its_records_only(self) -> None:
        second = MedicationSchedule.objects.create(
            patient=self.patient, medication_name="Lisinopril", dosage="10mg", times=["12:00"],
            start_date=self.today, end_date=self.today + timedelta(days=5),
        )
        ConsumptionRecord.objects.create(
            patient=self.patient, schedule=self.schedule, medication_name="Metformin",
            date=self.today, scheduled_time="08:00", status="taken",
        )
        kept = ConsumptionRecord.objects.create(
            patient=self.patient, schedule=second, medication_name="Lisinopril",
            date=self.today, scheduled_time="12:00", status="missed",
        )
        resp = self.admin_client.post(
            reverse("schedule_delete", args=[self.schedule.id]), {"hard": True}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data["hard"])
        self.assertFalse(MedicationSchedule.objects.filter(id=self.schedule.id).exists())
        self.assertFalse(ConsumptionRecord.objects.filter(schedule_id=self.schedule.id).exists())
        self.assertEqual(list(ConsumptionRecord.objects.filter(patient=self.patient)), [kept])
        self.assertTrue(Patient.objects.filter(id=self.patient.id).exists())

    def test_only_admin_deletes_patients(self) -> None:
        resp = self.doctor_client.post(reverse("patient_delete", args=[self.patient.id]), {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_search_patients_by_condition_and_id(self) -> None:
        resp = self.admin_client.get(reverse("patients"), {"q": "tipe 1"})
        self.assertEqual([p["id"] for p in resp.data["data"]], [self.other_patient.id])
        resp = self.admin_client.get(reverse("patients"), {"q": str(self.patient.id)})
        self.assertIn(self.patient.id, [p["id"] for p in resp.data["data"]])
        resp = self.admin_client.get(reverse("patients"), {"q": "GARCIA"})
        self.assertEqual([p["id"] for p in resp.data["data"]], [self.other_patient.id])

    def test_patient_compliance_endpoint(self) -> None:
        for t, s in (("08:00", "taken"), ("20:00", "missed")):
            ConsumptionRecord.objects.create(
                patient=self.patient, schedule=self.schedule, medication_name="Metformin",
                date=self.today, scheduled_time=t, status=s,
            )
        resp = self.doctor_client.get(reverse("patient_compliance", args=[self.patient.id]))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["data"]["complianceRate"], 50)
        self.assertEqual(resp.data["data"]["missed"], 1)

    # ------------------------------------------------------------------
    # Doctors and medications
    # ------------------------------------------------------------------
    def test_doctor_list_includes_patient_ids(self) -> None:
        resp = self.admin_client.get(reverse("doctors"), {"q": "kardio"})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data["data"]), 1)
        self.assertEqual(resp.data["data"][0]["patientIds"], [self.other_patient.id])
        self.assertEqual(resp.data["data"][0]["patientCount"], 1)

    def test_patients_cannot_list_doctors(self) -> None:
        resp = self.patient_client.get(reverse("doctors"))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_doctor_rename_updates_denormalized_names(self) -> None:
        resp = self.admin_client.post(
            reverse("doctor_update", args=[self.doctor.id]), {"name": "Dr. M. Chen"}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.patient.refresh_from_db()
        self.schedule.refresh_from_db()
        self.assertEqual(self.patient.doctor_name, "Dr. M. Chen")
        self.assertEqual(self.schedule.prescribed_by_name, "Dr. M. Chen")

    def test_doctor_delete_deactivates_account(self) -> None:
        resp = self.admin_client.post(reverse("doctor_delete", args=[self.doctor.id]), {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.doctor_user.refresh_from_db()
        self.assertFalse(self.doctor_user.is_active)
        self.assertFalse(Doctor.objects.get(id=self.doctor.id).is_active)

    def test_medication_catalogue_is_read_only_for_doctors(self) -> None:
        listed = self.doctor_client.get(reverse("medications"))
        self.assertEqual(listed.status_code, status.HTTP_200_OK)
        self.assertEqual(listed.data["data"][0]["name"], "Metformin")
        resp = self.doctor_client.post(reverse("medications"), {"name": "X", "dosage": "1mg"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_manages_medications(self) -> None:
        resp = self.admin_client.post(reverse("medications"), {
            "name": "Amoxicillin", "dosage": "500mg", "category": "Antibiotik",
            "sideEffects": ["Mual", "Diare"], "stockQuantity": 20,
        }, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        med_id = resp.data["data"]["id"]
        upd = self.admin_client.post(reverse("medication_update", args=[med_id]), {"stockQuantity": 15},
                                     format="json")
        self.assertEqual(upd.data["data"]["stockQuantity"], 15)
        self.admin_client.post(reverse("medication_delete", args=[med_id]), {}, format="json")
        names = [m["name"] for m in self.admin_client.get(reverse("medications")).data["data"]]
        self.assertNotIn("Amoxicillin", names)
        bad = self.admin_client.post(reverse("medications"), {"name": "Y", "dosage": "1", "category": "Herbal"},
                                     format="json")
        self.assertEqual(bad.status_code, status.HTTP_400_BAD_REQUEST)

    # ------------------------------------------------------------------
    # Schedules
    # ------------------------------------------------------------------
    def test_doctor_prescribes_schedule_for_own_patient(self) -> None:
        payload = {
            "patientId": self.patient.id, "medicationId": self.medication.id,
            "times": ["20:00", "08:00", "08:00"], "startDate": str(self.today),
            "endDate": str(self.today + timedelta(days=10)),
        }
        resp = self.doctor_client.post(reverse("schedules"), payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        data = resp.data["data"]
        self.assertEqual(data["times"], ["08:00", "20:00"])
        self.assertEqual(data["medicationName"], "Metformin")
        self.assertEqual(data["prescribedByName"], "Dr. Michael Chen")

    def test_blank_name_and_dosage_keep_medication_values(self) -> None:
        payload = {
            "patientId": self.patient.id, "medicationId": self.medication.id,
            "medicationName": "", "dosage": "", "times": ["08:00"],
            "startDate": str(self.today), "endDate": str(self.today + timedelta(days=3)),
        }
        resp = self.admin_client.post(reverse("schedules"), payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["data"]["medicationName"], "Metformin")
        self.assertEqual(resp.data["data"]["dosage"], "500mg")
        schedule = MedicationSchedule.objects.get(id=resp.data["data"]["id"])
        self.assertEqual((schedule.medication_name, schedule.dosage), ("Metformin", "500mg"))
        record = self.patient_client.post(reverse("records"), {
            "scheduleId": schedule.id, "date": str(self.today), "scheduledTime": "08:00", "actualTime": "08:00",
        }, format="json")
        self.assertEqual(record.data["data"]["medicationName"], "Metformin")

    def test_doctor_cannot_prescribe_for_other_patients(self) -> None:
        payload = {
            "patientId": self.other_patient.id, "medicationId": self.medication.id, "times": ["08:00"],
            "startDate": str(self.today), "endDate": str(self.today),
        }
        resp = self.doctor_client.post(reverse("schedules"), payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_schedule_validation(self) -> None:
        base = {"patientId": self.patient.id, "medicationId": self.medication.id, "startDate": str(self.today)}
        bad_time = self.admin_client.post(reverse("schedules"), {
            **base, "times": ["8am"], "endDate": str(self.today)}, format="json")
        self.assertEqual(bad_time.status_code, status.HTTP_400_BAD_REQUEST)
        backwards = self.admin_client.post(reverse("schedules"), {
            **base, "times": ["08:00"], "endDate": str(self.today - timedelta(days=1))}, format="json")
        self.assertEqual(backwards.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("endDate", backwards.data["error"]["message"])

    def test_patient_lists_own_schedules_and_cannot_edit(self) -> None:
        resp = self.patient_client.get(reverse("schedules"))
        self.assertEqual([s["id"] for s in resp.data["data"]], [self.schedule.id])
        upd = self.patient_client.post(reverse("schedule_update", args=[self.schedule.id]), {"times": ["09:00"]},
                                       format="json")
        self.assertEqual(upd.status_code, status.HTTP_403_FORBIDDEN)

    def test_schedule_soft_delete_and_search(self) -> None:
        found = self.admin_client.get(reverse("schedules"), {"q": "john"})
        self.assertEqual(len(found.data["data"]), 1)
        self.schedule.instructions = "Diminum setelah makan"
        self.schedule.save()
        by_instructions = self.doctor_client.get(reverse("schedules"), {"q": "SETELAH"})
        self.assertEqual([s["id"] for s in by_instructions.data["data"]], [self.schedule.id])
        self.assertEqual(self.doctor_client.get(reverse("schedules"), {"q": "sebelum"}).data["data"], [])
        resp = self.doctor_client.post(reverse("schedule_delete", args=[self.schedule.id]), {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(MedicationSchedule.objects.filter(id=self.schedule.id, is_active=False).exists())
        self.assertEqual(self.admin_client.get(reverse("schedules")).data["data"], [])

    # ------------------------------------------------------------------
    # Consumption records
    # ------------------------------------------------------------------
    def test_patient_records_dose_with_derived_status(self) -> None:
        resp = self.patient_client.post(reverse("records"), {
            "scheduleId": self.schedule.id, "date": str(self.today), "scheduledTime": "08:00", "actualTime": "09:15",
        }, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["data"]["status"], "late")
        self.assertEqual(resp.data["data"]["medicationName"], "Metformin")

    def test_record_time_must_be_on_schedule(self) -> None:
        resp = self.patient_client.post(reverse("records"), {
            "scheduleId": self.schedule.id, "date": str(self.today), "scheduledTime": "10:00",
        }, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_record_against_deactivated_schedule(self) -> None:
        self.doctor_client.post(reverse("schedule_delete", args=[self.schedule.id]), {}, format="json")
        resp = self.patient_client.post(reverse("records"), {
            "scheduleId": self.schedule.id, "date": str(self.today), "scheduledTime": "08:00", "actualTime": "08:00",
        }, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("scheduleId", resp.data["error"]["message"])
        self.assertFalse(ConsumptionRecord.objects.filter(schedule=self.schedule).exists())

    def test_other_doctor_cannot_record_for_patient(self) -> None:
        other_user = User.objects.create_user(username="w@example.com", email="w@example.com", password="x",
                                              role="doctor")
        self.other_doctor.user = other_user
        self.other_doctor.save()
        client = APIClient()
        client.force_authenticate(user=other_user)
        resp = client.post(reverse("records"), {
            "scheduleId": self.schedule.id, "date": str(self.today), "scheduledTime": "08:00",
        }, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_record_history_filters_and_update(self) -> None:
        missed = ConsumptionRecord.objects.create(
            patient=self.patient, schedule=self.schedule, medication_name="Metformin",
            date=self.today - timedelta(days=1), scheduled_time="08:00", status="missed",
        )
        ConsumptionRecord.objects.create(
            patient=self.patient, schedule=self.schedule, medication_name="Metformin",
            date=self.today, scheduled_time="08:00", actual_time="08:00", status="taken",
        )
        resp = self.patient_client.get(reverse("records"), {"status": "missed"})
        self.assertEqual([r["id"] for r in resp.data["data"]], [missed.id])
        self.assertEqual(resp.data["summary"]["missed"], 1)
        by_date = self.admin_client.get(reverse("records"), {"q": str(self.today)})
        self.assertEqual(len(by_date.data["data"]), 1)

        upd = self.doctor_client.post(reverse("record_update", args=[missed.id]), {"actualTime": "08:10"},
                                      format="json")
        self.assertEqual(upd.status_code, status.HTTP_200_OK)
        self.assertEqual(upd.data["data"]["status"], "taken")

    def test_consumption_report_is_admin_only(self) -> None:
        ConsumptionRecord.objects.create(
            patient=self.patient, schedule=self.schedule, medication_name="Metformin",
            date=self.today, scheduled_time="08:00", status="late",
        )
        self.assertEqual(self.doctor_client.get(reverse("consumption_report")).status_code,
                         status.HTTP_403_FORBIDDEN)
        resp = self.admin_client.get(reverse("consumption_report"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["data"]["summary"]["complianceRate"], 100)
        self.assertEqual(resp.data["data"]["patients"][0]["patientName"], "John Smith")
