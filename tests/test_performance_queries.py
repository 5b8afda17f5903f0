from datetime import date

from django.db import connection
from django.test import TestCase
from django.test.utils import CaptureQueriesContext
from django.urls import reverse

from apps.accounts.models import User
from apps.audits.utils import log_action
from apps.notifications.models import Notification
from apps.teaching_sessions.models import Session

from .base import make_session


class QueryBudgetTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = User.objects.create_user(
            email='admin-perf@example.com',
            nom='Admin',
            prenom='Perf',
            password='pass1234',
            role=User.Role.ADMIN,
        )
        cls.secretary = User.objects.create_user(
            email='secretary-perf@example.com',
            nom='Secretary',
            prenom='Perf',
            password='pass1234',
            role=User.Role.SECRETARY,
        )

        cls.teachers = []
        for idx in range(1, 11):
            teacher = User.objects.create_user(
                email=f'teacher-perf-{idx}@example.com',
                nom='Teacher',
                prenom=f'Perf{idx}',
                password='pass1234',
                role=User.Role.TEACHER,
                in_pacte=idx % 2 == 0,
            )
            cls.teachers.append(teacher)
            for day, session_type in enumerate(Session.Type.values, start=1):
                session = make_session(
                    teacher,
                    session_type=session_type,
                    date=date(2025, 11, day),
                    status=Session.Status.VALIDATED if day % 2 else Session.Status.SUBMITTED,
                )
                Notification.objects.create(
                    id_utilisateur=teacher, session=session, type='VALIDATED', titre='Validée', message='ok'
                )
                log_action(cls.secretary, f"Séance {session.pk} contrôlée", objet_type='SESSION', objet_id=session.pk)

    def assert_max_queries(self, max_queries, func, *args, **kwargs):
        # Warm up session/auth and URL resolver to reduce CI flakiness.
        func(*args, **kwargs)

        with CaptureQueriesContext(connection) as captured:
            response = func(*args, **kwargs)

        self.assertLessEqual(
            len(captured),
            max_queries,
            (
                f"Trop de requetes SQL: {len(captured)} (max: {max_queries}).\n"
                + "\n".join(q['sql'] for q in captured.captured_queries[:12])
            ),
        )
        return response

    def test_session_list_query_budget(self):
        self.client.force_login(self.secretary)
        response = self.assert_max_queries(
            5,
            self.client.get,
            reverse('teaching_sessions:session_collection'),
            secure=True,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()['results']), 40)

    def test_teacher_report_query_budget(self):
        self.client.force_login(self.secretary)
        response = self.assert_max_queries(
            5,
            self.client.get,
            reverse('dashboard:report_teachers'),
            secure=True,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()['results']), 10)

    def test_summary_report_query_budget(self):
        self.client.force_login(self.secretary)
        response = self.assert_max_queries(
            5,
            self.client.get,
            reverse('dashboard:report_summary'),
            secure=True,
        )
        self.assertEqual(response.json()['total'], 40)

    def test_audit_list_query_budget(self):
        self.client.force_login(self.admin)
        response = self.assert_max_queries(
            6,
            self.client.get,
            reverse('audits:audit_list'),
            secure=True,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['count'], 40)

    def test_notification_list_query_budget(self):
        self.client.force_login(self.teachers[0])
        response = self.assert_max_queries(
            5,
            self.client.get,
            reverse('notifications:notification_list'),
            secure=True,
        )
        self.assertEqual(len(response.json()['results']), 4)

    def test_excel_export_query_budget(self):
        self.client.force_login(self.secretary)
        response = self.assert_max_queries(
            8,
            self.client.get,
            reverse('dashboard:export_sessions_excel'),
            secure=True,
        )
        self.assertEqual(response.status_code, 200)
