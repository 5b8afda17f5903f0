from datetime import timedelta

from django.test import SimpleTestCase
from django.utils import timezone

from apps.teaching_sessions import policies
from apps.teaching_sessions.models import Session
from apps.teaching_sessions.payloads import DescriptionPayload, DevoirsFaitsPayload, RcdPayload


class EditWindowPolicyTests(SimpleTestCase):
    def setUp(self):
        self.now = timezone.now()

    def session(self, status=Session.Status.SUBMITTED, minutes_ago=0):
        return Session(status=status, created_at=self.now - timedelta(minutes=minutes_ago))

    def test_window_boundary_is_inclusive(self):
        self.assertTrue(policies.within_edit_window(self.now - timedelta(minutes=60), self.now, 60))
        self.assertFalse(
            policies.within_edit_window(self.now - timedelta(minutes=60, seconds=1), self.now, 60)
        )

    def test_only_submitted_and_incomplete_are_editable(self):
        for status in Session.Status:
            expected = status in (Session.Status.SUBMITTED, Session.Status.INCOMPLETE)
            with self.subTest(status=status):
                self.assertEqual(policies.is_editable(self.session(status), self.now), expected)

    def test_edit_window_status_reports_remaining_minutes(self):
        status = policies.edit_window_status(self.session(minutes_ago=25), self.now, 60)

        self.assertEqual(status, {
            'is_editable': True,
            'edit_window': 60,
            'elapsed': 25,
            'remaining': 35,
        })

    def test_remaining_never_goes_negative(self):
        status = policies.edit_window_status(self.session(minutes_ago=500), self.now, 60)

        self.assertFalse(status['is_editable'])
        self.assertEqual(status['remaining'], 0)


class PayloadCompletenessTests(SimpleTestCase):

    def test_rcd_requires_replaced_teacher_and_class(self):
        self.assertEqual(RcdPayload().missing_fields(), ['last_name', 'class_name'])
        self.assertEqual(RcdPayload(last_name='Martin', class_name='5eB').missing_fields(), [])

    def test_devoirs_faits_requires_positive_student_count(self):
        self.assertEqual(
            DevoirsFaitsPayload(student_count=0, grade_level='6e').missing_fields(),
            ['student_count'],
        )
        self.assertEqual(DevoirsFaitsPayload(student_count=8, grade_level='').missing_fields(), ['grade_level'])

    def test_blank_description_is_missing(self):
        self.assertEqual(DescriptionPayload(description='   ').missing_fields(), ['description'])

    def test_payload_follows_original_type(self):
        session = Session(
            type=Session.Type.HSE,
            original_type=Session.Type.DEVOIRS_FAITS,
            student_count=10,
            grade_level='4e',
            description='',
        )

        self.assertIsInstance(session.payload, DevoirsFaitsPayload)
        self.assertTrue(policies.is_complete(session))

    def test_missing_fields_of_session(self):
        session = Session(type=Session.Type.AUTRE, original_type=Session.Type.AUTRE, description='')

        self.assertEqual(policies.missing_fields(session), ['description'])
        self.assertFalse(policies.is_complete(session))
