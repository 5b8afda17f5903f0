from datetime import date
from io import BytesIO

from django.test import SimpleTestCase
from django.urls import reverse
from openpyxl import load_workbook

from apps.audits.models import LogAudit
from apps.dashboard.models import SystemSettings
from apps.dashboard.services import school_year_bounds, status_summary, teacher_stats
from apps.dashboard.views_export import EXPORT_COLUMNS
from apps.teaching_sessions.models import Session

from .base import BaseSessionTestCase, make_session

Status = Session.Status


class SchoolYearTests(SimpleTestCase):

    def test_school_year_starts_in_september(self):
        self.assertEqual(
            school_year_bounds(date(2025, 9, 1)),
            (date(2025, 9, 1), date(2026, 8, 31), '2025-2026'),
        )
        self.assertEqual(school_year_bounds(date(2026, 8, 31))[2], '2025-2026')
        self.assertEqual(school_year_bounds(date(2025, 8, 31))[2], '2024-2025')


class SystemSettingsApiTests(BaseSessionTestCase):
    def setUp(self):
        super().setUp()
        self.url = reverse('dashboard:system_settings')

    def test_every_role_reads_settings(self):
        self.client.force_login(self.teacher)

        response = self.client.get(self.url, secure=True)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['session_edit_window_minutes'], 60)
        self.assertFalse(response.json()['require_verified_attachments'])

    def test_admin_updates_window(self):
        self.client.force_login(self.admin)

        response = self.client.patch(
            self.url, {'session_edit_window_minutes': 30}, content_type='application/json', secure=True
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['session_edit_window_minutes'], 30)
        self.assertEqual(response.json()['modified_by'], 'Sophie Roux')
        self.assertEqual(SystemSettings.get_settings().session_edit_window_minutes, 30)
        log = LogAudit.objects.get(objet_type='SETTINGS')
        self.assertEqual(log.niveau, 'CRITIQUE')

    def test_window_out_of_range_is_refused(self):
        self.client.force_login(self.admin)

        for value in (0, 10081):
            with self.subTest(value=value):
                response = self.client.patch(
                    self.url, {'session_edit_window_minutes': value},
                    content_type='application/json', secure=True,
                )
                error = self.assert_json_error(response, status=400, code='bad_request')
                self.assertIn('session_edit_window_minutes', error['fields'])

        self.assertEqual(SystemSettings.get_settings().session_edit_window_minutes, 60)

    def test_only_admin_can_update(self):
        self.client.force_login(self.principal)

        response = self.client.patch(
            self.url, {'require_verified_attachments': True}, content_type='application/json', secure=True
        )

        self.assert_json_error(response, status=403, code='forbidden', message='Forbidden')
        self.assertFalse(SystemSettings.get_settings().require_verified_attachments)
        self.assertFalse(LogAudit.objects.filter(objet_type='SETTINGS').exists())

    def test_singleton_id_is_forced(self):
        settings_row = SystemSettings(id=7, session_edit_window_minutes=45)
        settings_row.save()

        self.assertEqual(settings_row.pk, 1)
        self.assertEqual(SystemSettings.objects.count(), 1)


class ReportTests(BaseSessionTestCase):
    def setUp(self):
        super().setUp()
        self.teacher.in_pacte = True
        self.teacher.save()
        make_session(self.teacher, status=Status.VALIDATED)
        make_session(self.teacher, status=Status.PAID, session_type=Session.Type.DEVOIRS_FAITS)
        make_session(self.teacher, session_type=Session.Type.HSE, date=date(2024, 10, 1))
        make_session(self.other_teacher, status=Status.REJECTED, session_type=Session.Type.AUTRE)

    def test_status_summary_counts_every_status(self):
        summary = status_summary()

        self.assertEqual(summary['total'], 4)
        self.assertEqual(summary['by_status'][Status.VALIDATED], 1)
        self.assertEqual(summary['by_status'][Status.READY_FOR_PAYMENT], 0)
        self.assertEqual(summary['by_type'][Session.Type.RCD], 1)
        self.assertEqual(set(summary['by_status']), set(Status.values))

    def test_teacher_stats_for_current_school_year(self):
        stats = {row['teacher_id']: row for row in teacher_stats(today=date(2025, 10, 15))}

        row = stats[self.teacher.pk]
        self.assertTrue(row['in_pacte'])
        self.assertEqual(row['total'], 3)
        self.assertEqual(row['current_year'], 2)
        self.assertEqual(row['rcd'], 1)
        self.assertEqual(row['devoirs_faits'], 1)
        self.assertEqual(row['hse'], 0)
        self.assertEqual(row['validated'], 2)
        self.assertEqual(stats[self.other_teacher.pk]['validated'], 0)

    def test_teacher_stats_pacte_filter(self):
        rows = teacher_stats(today=date(2025, 10, 15), in_pacte=False)

        self.assertEqual([row['teacher_id'] for row in rows], [self.other_teacher.pk])

    def test_summary_endpoint_filters_by_period(self):
        self.client.force_login(self.secretary)

        response = self.client.get(
            reverse('dashboard:report_summary'), {'date_from': '2025-09-01'}, secure=True
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['total'], 3)

    def test_reports_are_staff_only(self):
        self.client.force_login(self.teacher)

        for name in ('dashboard:report_summary', 'dashboard:report_teachers', 'dashboard:export_sessions_excel'):
            with self.subTest(name=name):
                response = self.client.get(reverse(name), secure=True)
                self.assert_json_error(response, status=403, code='forbidden', message='Forbidden')

    def test_invalid_pacte_filter(self):
        self.client.force_login(self.principal)

        response = self.client.get(reverse('dashboard:report_teachers'), {'in_pacte': 'peut-être'}, secure=True)

        self.assert_json_error(response, status=400, code='bad_request')

    def test_excel_export_of_validated_sessions(self):
        self.client.force_login(self.secretary)

        response = self.client.get(
            reverse('dashboard:export_sessions_excel'), {'status': 'VALIDATED'}, secure=True
        )

        self.assertEqual(response.status_code, 200)
        self.assertIn('declarations_validated.xlsx', response['Content-Disposition'])
        sheet = load_workbook(BytesIO(response.content)).active
        rows = list(sheet.iter_rows(values_only=True))
        self.assertEqual(list(rows[0]), EXPORT_COLUMNS)
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[1][5], 'Paul Durand')
        self.assertEqual(rows[1][6], 'Oui')
        self.assertTrue(LogAudit.objects.filter(objet_type='EXPORT').exists())

    def test_excel_export_keeps_formula_like_text_as_text(self):
        text = '=HYPERLINK("http://x","clic")'
        make_session(
            self.teacher,
            status=Status.READY_FOR_PAYMENT,
            session_type=Session.Type.HSE,
            description=text,
        )
        self.client.force_login(self.secretary)

        response = self.client.get(
            reverse('dashboard:export_sessions_excel'), {'status': 'READY_FOR_PAYMENT'}, secure=True
        )

        sheet = load_workbook(BytesIO(response.content)).active
        cell = sheet.cell(row=2, column=EXPORT_COLUMNS.index('Description') + 1)
        self.assertEqual(cell.data_type, 's')
        self.assertEqual(cell.value, text)
