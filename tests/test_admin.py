from django.urls import reverse

from apps.teaching_sessions.models import Session

from .base import BaseSessionTestCase, make_session


class SessionAdminTests(BaseSessionTestCase):
    def setUp(self):
        super().setUp()
        self.session = make_session(self.teacher, status=Session.Status.PAID)
        self.change_url = reverse('admin:teaching_sessions_session_change', args=[self.session.pk])
        self.client.force_login(self.admin)

    def test_admin_can_consult_session(self):
        response = self.client.get(self.change_url, secure=True)

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Paul Durand')

    def test_change_form_post_is_refused(self):
        response = self.client.post(
            self.change_url,
            {'type': Session.Type.HSE, 'description': 'edited', 'status': Session.Status.PAID},
            secure=True,
        )

        self.assertEqual(response.status_code, 403)
        self.session.refresh_from_db()
        self.assertEqual(self.session.type, Session.Type.RCD)
        self.assertEqual(self.session.description, '')
        self.assertEqual(self.session.version, 1)

    def test_add_and_delete_are_not_offered(self):
        add_response = self.client.get(reverse('admin:teaching_sessions_session_add'), secure=True)
        delete_response = self.client.post(
            reverse('admin:teaching_sessions_session_delete', args=[self.session.pk]),
            {'post': 'yes'},
            secure=True,
        )

        self.assertEqual(add_response.status_code, 403)
        self.assertEqual(delete_response.status_code, 403)
        self.assertTrue(Session.objects.filter(pk=self.session.pk).exists())
