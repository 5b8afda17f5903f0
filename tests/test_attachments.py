import shutil
import tempfile
from unittest.mock import patch

from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db.models import F
from django.test import SimpleTestCase
from django.test.utils import override_settings
from django.urls import reverse

from apps.attachments import validators
from apps.attachments.models import Attachment
from apps.attachments.store import AttachmentStore
from apps.audits.models import LogAudit
from apps.teaching_sessions import services
from apps.teaching_sessions.exceptions import ConcurrentModification
from apps.teaching_sessions.models import Session
from apps.teaching_sessions.repository import SessionRepository

from .base import BaseSessionTestCase, make_session


def pdf_upload(name='emargement.pdf', content=b'%PDF-1.4 sample'):
    return SimpleUploadedFile(name, content, content_type='application/pdf')


class ConcurrentWriteAfterLoadRepository(SessionRepository):
    """Une autre écriture incrémente la version juste après la lecture."""

    def load(self, session_id):
        session = super().load(session_id)
        Session.objects.filter(pk=session_id).update(version=F('version') + 1)
        return session


class BaseAttachmentTestCase(BaseSessionTestCase):
    def setUp(self):
        super().setUp()
        self._temp_media_root = tempfile.mkdtemp()
        self._override_settings = override_settings(MEDIA_ROOT=self._temp_media_root)
        self._override_settings.enable()
        self.addCleanup(self._cleanup_media_root)

        magic_patcher = patch('apps.attachments.validators.magic')
        self.magic = magic_patcher.start()
        self.magic.from_buffer.return_value = 'application/pdf'
        self.addCleanup(magic_patcher.stop)

        self.session = make_session(self.teacher)

    def _cleanup_media_root(self):
        self._override_settings.disable()
        shutil.rmtree(self._temp_media_root, ignore_errors=True)

    def upload(self, uploaded, session=None):
        session = session or self.session
        return self.client.post(
            reverse('attachments:session_attachments', args=[session.pk]),
            data={'file': uploaded},
            secure=True,
        )


class AttachmentUploadTests(BaseAttachmentTestCase):

    def test_teacher_uploads_pdf(self):
        self.client.force_login(self.teacher)

        response = self.upload(pdf_upload())

        self.assertEqual(response.status_code, 201)
        payload = response.json()
        self.assertEqual(payload['original_name'], 'emargement.pdf')
        self.assertEqual(payload['mime_type'], 'application/pdf')
        self.assertFalse(payload['is_verified'])
        attachment = Attachment.objects.get(pk=payload['id'])
        self.assertNotEqual(attachment.file.name.rsplit('/', 1)[-1], 'emargement.pdf')
        self.assertTrue(LogAudit.objects.filter(objet_type='ATTACHMENT', objet_id=attachment.pk).exists())

    def test_upload_rejects_invalid_extension(self):
        self.client.force_login(self.teacher)

        response = self.upload(pdf_upload(name='emargement.txt'))

        self.assert_json_error(response, status=400, code='bad_request')
        self.assertFalse(Attachment.objects.exists())

    def test_upload_rejects_forged_binary_file(self):
        self.client.force_login(self.teacher)

        response = self.upload(pdf_upload(content=b'\x89PNG\r\n\x1a\nspoofed-content'))

        self.assert_json_error(response, status=400, code='bad_request')
        self.assertFalse(Attachment.objects.exists())

    def test_upload_rejects_mime_mismatch(self):
        self.magic.from_buffer.return_value = 'text/plain'
        self.client.force_login(self.teacher)

        response = self.upload(pdf_upload())

        self.assert_json_error(response, status=400, code='bad_request')

    def test_missing_file_field(self):
        self.client.force_login(self.teacher)

        response = self.client.post(
            reverse('attachments:session_attachments', args=[self.session.pk]),
            data={},
            secure=True,
        )

        self.assert_json_error(response, status=400, code='bad_request', message='Aucun fichier reçu.')

    def test_other_teacher_cannot_upload(self):
        self.client.force_login(self.other_teacher)

        response = self.upload(pdf_upload())

        self.assert_json_error(response, status=403, code='forbidden')

    def test_paid_session_is_locked(self):
        paid = make_session(self.teacher, status=Session.Status.PAID)
        self.client.force_login(self.secretary)

        response = self.upload(pdf_upload(), session=paid)

        self.assert_json_error(response, status=409, code='attachment_locked')


class AttachmentReviewTests(BaseAttachmentTestCase):
    def setUp(self):
        super().setUp()
        self.attachment = AttachmentStore().add(self.session, pdf_upload(), self.teacher)

    def test_secretary_verifies_attachment(self):
        self.client.force_login(self.secretary)

        response = self.client.post(
            reverse('attachments:attachment_verify', args=[self.attachment.pk]), secure=True
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['is_verified'])
        self.assertEqual(response.json()['verified_by'], self.secretary.pk)
        self.assertTrue(AttachmentStore().has_verified_attachments(self.session.pk))

    def test_teacher_cannot_verify(self):
        self.client.force_login(self.teacher)

        response = self.client.post(
            reverse('attachments:attachment_verify', args=[self.attachment.pk]), secure=True
        )

        self.assert_json_error(response, status=403, code='forbidden')

    def test_archived_attachments_are_hidden_by_default(self):
        AttachmentStore().archive(self.attachment, self.secretary)
        self.client.force_login(self.teacher)
        url = reverse('attachments:session_attachments', args=[self.session.pk])

        response = self.client.get(url, secure=True)
        self.assertEqual(response.json()['results'], [])
        self.assertEqual(response.json()['counts'], {'total': 1, 'verified': 0, 'archived': 1})

        response = self.client.get(url, {'archived': '1'}, secure=True)
        self.assertEqual([item['id'] for item in response.json()['results']], [self.attachment.pk])

    def test_archived_verified_attachment_still_counts(self):
        store = AttachmentStore()
        store.verify(self.attachment, self.secretary)
        store.archive(self.attachment, self.secretary)

        self.assertTrue(store.has_verified_attachments(self.session.pk))

    def test_download_returns_file(self):
        self.client.force_login(self.teacher)

        response = self.client.get(
            reverse('attachments:attachment_download', args=[self.attachment.pk]), secure=True
        )

        self.assertEqual(response.status_code, 200)
        self.assertIn('attachment;', response['Content-Disposition'])
        self.assertIn(b'%PDF-1.4', b''.join(response.streaming_content))

    def test_download_returns_404_when_file_is_missing(self):
        self.attachment.file.delete(save=False)
        self.client.force_login(self.teacher)

        response = self.client.get(
            reverse('attachments:attachment_download', args=[self.attachment.pk]), secure=True
        )

        self.assert_json_error(response, status=404, code='not_found')

    def test_teacher_deletes_attachment(self):
        self.client.force_login(self.teacher)

        response = self.client.delete(
            reverse('attachments:attachment_detail', args=[self.attachment.pk]), secure=True
        )

        self.assertEqual(response.status_code, 204)
        self.assertFalse(Attachment.objects.exists())

    def test_attachment_of_paid_session_cannot_be_deleted(self):
        Session.objects.filter(pk=self.session.pk).update(status=Session.Status.PAID)
        self.client.force_login(self.principal)

        response = self.client.delete(
            reverse('attachments:attachment_detail', args=[self.attachment.pk]), secure=True
        )

        self.assert_json_error(response, status=409, code='attachment_locked')
        self.assertTrue(Attachment.objects.filter(pk=self.attachment.pk).exists())


class SessionDeletionFilesTests(BaseAttachmentTestCase):
    def setUp(self):
        super().setUp()
        self.attachment = AttachmentStore().add(self.session, pdf_upload(), self.teacher)
        self.file_name = self.attachment.file.name

    def test_files_are_removed_once_session_is_deleted(self):
        with self.captureOnCommitCallbacks(execute=True):
            services.delete_session(self.session.pk, self.principal)

        self.assertFalse(Session.objects.filter(pk=self.session.pk).exists())
        self.assertFalse(default_storage.exists(self.file_name))

    def test_conflicting_delete_keeps_files(self):
        repository = ConcurrentWriteAfterLoadRepository()

        with self.captureOnCommitCallbacks(execute=True):
            with self.assertRaises(ConcurrentModification):
                services.delete_session(self.session.pk, self.principal, repository=repository)

        self.assertTrue(Session.objects.filter(pk=self.session.pk).exists())
        self.assertTrue(Attachment.objects.filter(pk=self.attachment.pk).exists())
        self.assertTrue(default_storage.exists(self.file_name))


class AttachmentValidatorTests(SimpleTestCase):

    def test_dangerous_double_extension(self):
        with self.assertRaises(validators.AttachmentValidationError):
            validators.validate_attachment(pdf_upload(name='script.php.pdf'))

    @override_settings(ATTACHMENT_MAX_UPLOAD_MB=0)
    def test_oversized_file(self):
        with self.assertRaises(validators.AttachmentValidationError):
            validators.validate_attachment(pdf_upload())

    def test_magic_unavailable_refuses_upload(self):
        with patch('apps.attachments.validators.magic', None):
            with self.assertRaises(validators.AttachmentValidationError):
                validators.validate_attachment(pdf_upload())

    def test_random_storage_name_keeps_only_suffix(self):
        name = validators.random_storage_name('PDF')

        self.assertTrue(name.endswith('.pdf'))
        self.assertEqual(len(name), 32 + len('.pdf'))

    def test_random_storage_name_refuses_other_extensions(self):
        with self.assertRaises(validators.AttachmentValidationError):
            validators.random_storage_name('.exe')
