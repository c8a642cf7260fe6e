"""
Tests for the admin mailer in apps.notifications.services.
"""

from unittest.mock import patch

from django.core import mail
from django.test import TestCase, override_settings
from django.utils import translation

from apps.archive.models import Chapter, Comment, Tag
from apps.archive.services import delete_user
from apps.notifications import services

from .factories import create_admin, create_admin_post, create_comment, create_user, create_work

IMAGE_URL = 'an_image.png'
IMAGE_TAG = f'<img src="{IMAGE_URL}">'


def html_part(message):
    content, mimetype = message.alternatives[0]
    assert mimetype == 'text/html'
    return content


def text_part(message):
    return message.body


class MultipartAssertions:

    def assertValidSender(self, message):
        self.assertEqual(message.from_email, 'do-not-reply@example.org')

    def assertMultipart(self, message):
        self.assertTrue(message.body.strip())
        self.assertEqual(len(message.alternatives), 1)
        self.assertEqual(message.alternatives[0][1], 'text/html')


class CommentNotificationTests(MultipartAssertions, TestCase):

    def setUp(self):
        self.post = create_admin_post(title='Site maintenance')
        self.comment = create_comment(self.post, comment_content=f'<p>Lovely news.</p>{IMAGE_TAG}')

    def send(self):
        self.assertTrue(services.comment_notification(self.comment.id))
        self.assertEqual(len(mail.outbox), 1)
        return mail.outbox[0]

    def test_headers(self):
        message = self.send()

        self.assertEqual(message.to, ['admin@example.org'])
        self.assertEqual(message.subject, '[AO3] Comment on Site maintenance')
        self.assertValidSender(message)
        self.assertMultipart(message)

    def test_body_names_commenter_and_content(self):
        message = self.send()

        self.assertIn('Guest', html_part(message))
        self.assertIn('Lovely news.', html_part(message))
        self.assertIn('Guest', text_part(message))
        self.assertIn('Lovely news.', text_part(message))

    @override_settings(PARENTS_WITH_IMAGE_SAFETY_MODE=['AdminPost'])
    def test_strips_image_but_leaves_url_when_safety_mode_on(self):
        message = self.send()

        self.assertNotIn(IMAGE_TAG, html_part(message))
        self.assertNotIn(IMAGE_TAG, text_part(message))
        self.assertIn(IMAGE_URL, html_part(message))
        self.assertIn(IMAGE_URL, text_part(message))

    @override_settings(PARENTS_WITH_IMAGE_SAFETY_MODE=[])
    def test_embeds_image_when_safety_mode_disabled(self):
        message = self.send()

        self.assertIn(IMAGE_TAG, html_part(message))
        self.assertNotIn(IMAGE_URL, text_part(message))

    @override_settings(PARENTS_WITH_IMAGE_SAFETY_MODE=['Chapter', 'Tag'])
    def test_embeds_image_when_safety_mode_on_for_other_types(self):
        message = self.send()

        self.assertIn(IMAGE_TAG, html_part(message))
        self.assertNotIn(IMAGE_URL, text_part(message))

    @override_settings(PARENTS_WITH_IMAGE_SAFETY_MODE=['AdminPost'])
    def test_reply_uses_the_admin_post_as_parent(self):
        reply = create_comment(self.comment, comment_content=f'Agreed {IMAGE_TAG}')

        services.comment_notification(reply.id)
        message = mail.outbox[0]

        self.assertEqual(message.subject, '[AO3] Comment on Site maintenance')
        self.assertNotIn(IMAGE_TAG, html_part(message))

    def test_missing_comment_is_skipped(self):
        comment_id = self.comment.id
        self.comment.delete()

        with self.assertLogs('apps.notifications.services', level='WARNING'):
            self.assertFalse(services.comment_notification(comment_id))
        self.assertEqual(mail.outbox, [])

    def test_comment_markup_is_sanitized(self):
        comment = create_comment(
            self.post,
            comment_content='<script>alert(1)</script><a href="javascript:alert(2)" onclick="x()">hi</a>',
        )

        self.assertTrue(services.comment_notification(comment.id))
        html = html_part(mail.outbox[0])

        self.assertNotIn('<script', html)
        self.assertNotIn('onclick', html)
        self.assertNotIn('javascript:', html)
        self.assertIn('>hi</a>', html)
        self.assertNotIn('<script', text_part(mail.outbox[0]))

    def test_deleting_a_comment_deletes_its_replies(self):
        reply = create_comment(self.comment, comment_content='Agreed')

        self.comment.delete()

        self.assertFalse(Comment.objects.filter(pk=reply.pk).exists())
        with self.assertLogs('apps.notifications.services', level='WARNING'):
            self.assertFalse(services.comment_notification(reply.id))
        self.assertEqual(mail.outbox, [])

    def test_reply_whose_parent_is_gone_is_skipped(self):
        reply = create_comment(self.comment, comment_content='Agreed')
        Comment.objects.filter(pk=reply.pk).update(object_id=0)

        with self.assertLogs('apps.notifications.services', level='WARNING') as logs:
            self.assertFalse(services.comment_notification(reply.id))

        self.assertIn('no parent', logs.output[0])
        self.assertEqual(mail.outbox, [])

    def test_send_failure_is_logged_not_raised(self):
        with patch('apps.notifications.services.EmailMultiAlternatives.send',
                   side_effect=ConnectionRefusedError('smtp down')):
            with self.assertLogs('apps.notifications.services', level='ERROR') as logs:
                self.assertFalse(services.comment_notification(self.comment.id))

        self.assertIn('smtp down', logs.output[0])


class EditedCommentNotificationTests(MultipartAssertions, TestCase):

    def setUp(self):
        self.post = create_admin_post(title='Site maintenance')
        self.comment = create_comment(self.post, comment_content=f'Edited. {IMAGE_TAG}')

    def send(self):
        self.assertTrue(services.edited_comment_notification(self.comment.id))
        return mail.outbox[0]

    def test_headers(self):
        message = self.send()

        self.assertEqual(message.to, ['admin@example.org'])
        self.assertEqual(message.subject, '[AO3] Edited comment on Site maintenance')
        self.assertValidSender(message)
        self.assertMultipart(message)

    @override_settings(PARENTS_WITH_IMAGE_SAFETY_MODE=['AdminPost'])
    def test_strips_image_but_leaves_url_when_safety_mode_on(self):
        message = self.send()

        self.assertNotIn(IMAGE_TAG, html_part(message))
        self.assertNotIn(IMAGE_TAG, text_part(message))
        self.assertIn(IMAGE_URL, html_part(message))
        self.assertIn(IMAGE_URL, text_part(message))

    @override_settings(PARENTS_WITH_IMAGE_SAFETY_MODE=[])
    def test_embeds_image_in_html_when_safety_mode_disabled(self):
        message = self.send()

        self.assertIn(IMAGE_TAG, html_part(message))
        self.assertNotIn(IMAGE_URL, text_part(message))

    @override_settings(PARENTS_WITH_IMAGE_SAFETY_MODE=['Chapter', 'Tag'])
    def test_embeds_image_in_html_when_safety_mode_on_for_other_types(self):
        message = self.send()

        self.assertIn(IMAGE_TAG, html_part(message))
        self.assertNotIn(IMAGE_URL, text_part(message))


    def test_reply_whose_parent_is_gone_is_skipped(self):
        reply = create_comment(self.comment, comment_content='Agreed')
        Comment.objects.filter(pk=reply.pk).update(object_id=0)

        with self.assertLogs('apps.notifications.services', level='WARNING'):
            self.assertFalse(services.edited_comment_notification(reply.id))
        self.assertEqual(mail.outbox, [])


class CommentParentTypeTests(TestCase):

    def test_parent_type_names_the_commented_object(self):
        work = create_work('A work')
        chapter = Chapter.objects.create(work=work, content='Once upon a time')
        tag = Tag.objects.create(name='Fluff')

        self.assertEqual(create_comment(create_admin_post()).parent_type, 'AdminPost')
        self.assertEqual(create_comment(chapter).parent_type, 'Chapter')
        self.assertEqual(create_comment(tag).parent_type, 'Tag')

    @override_settings(PARENTS_WITH_IMAGE_SAFETY_MODE=['Chapter'])
    def test_chapter_comments_follow_their_own_setting(self):
        work = create_work('A work')
        chapter = Chapter.objects.create(work=work, content='Once upon a time')
        comment = create_comment(chapter, comment_content=IMAGE_TAG)

        services.comment_notification(comment.id)

        self.assertEqual(mail.outbox[0].subject, '[AO3] Comment on A work')
        self.assertNotIn(IMAGE_TAG, html_part(mail.outbox[0]))


class SpamAlertTests(MultipartAssertions, TestCase):

    def setUp(self):
        self.spam_user = create_user('spammer')
        self.spam1 = create_work('First Spam', authors=[self.spam_user], spam=True)
        self.spam2 = create_work('Second Spam', authors=[self.spam_user], spam=True)
        self.spam3 = create_work('Third Spam', authors=[self.spam_user], spam=True)

        self.other_user = create_user('bystander')
        self.other_spam = create_work('Mistaken Spam', authors=[self.other_user], spam=True)

        self.report = {
            self.spam_user.id: {'score': 13, 'work_ids': [self.spam1.id, self.spam2.id, self.spam3.id]},
            self.other_user.id: {'score': 5, 'work_ids': [self.other_spam.id]},
        }

    def send(self):
        self.assertTrue(services.send_spam_alert(self.report))
        self.assertEqual(len(mail.outbox), 1)
        return mail.outbox[0]

    def test_headers(self):
        message = self.send()

        self.assertEqual(message.subject, '[AO3] Potential spam alert')
        self.assertEqual(message.to, ['spam-alerts@example.org'])
        self.assertValidSender(message)
        self.assertMultipart(message)

    def test_lists_usernames_and_all_work_titles(self):
        message = self.send()

        for body in (html_part(message), text_part(message)):
            with self.subTest(body=body[:20]):
                for expected in ('spammer', 'First Spam', 'Second Spam', 'Third Spam',
                                 'bystander', 'Mistaken Spam'):
                    self.assertIn(expected, body)

    def test_lists_users_in_report_order(self):
        message = self.send()

        for body in (html_part(message), text_part(message)):
            self.assertRegex(body, r'(?s)spammer.*bystander')

    def test_silently_omits_deleted_user(self):
        delete_user(self.spam_user)

        message = self.send()

        for body in (html_part(message), text_part(message)):
            for missing in ('spammer', 'First Spam', 'Second Spam', 'Third Spam'):
                self.assertNotIn(missing, body)
            self.assertIn('bystander', body)
            self.assertIn('Mistaken Spam', body)

    def test_not_sent_when_no_users_remain(self):
        report = {self.spam_user.id: self.report[self.spam_user.id]}
        delete_user(self.spam_user)

        self.assertFalse(services.send_spam_alert(report))
        self.assertEqual(mail.outbox, [])


class SetPasswordNotificationTests(MultipartAssertions, TestCase):

    def setUp(self):
        self.admin = create_admin('testadmin', email='testadmin@example.org')
        self.token = 'abc123'

    def send(self):
        self.assertTrue(services.set_password_notification(self.admin, self.token))
        return mail.outbox[0]

    def test_headers(self):
        message = self.send()

        self.assertEqual(message.to, ['testadmin@example.org'])
        self.assertEqual(message.subject, '[AO3] Your AO3 admin account')
        self.assertValidSender(message)
        self.assertMultipart(message)

    def test_html_content(self):
        html = html_part(self.send())

        self.assertIn('username: </b>testadmin', html)
        self.assertIn('URL: </b><a', html)
        self.assertIn('>http://www.example.com/admin/login</a>', html)
        self.assertIn('</a> so you can log in.', html)
        self.assertIn(self.token, html)

    def test_text_content(self):
        text = text_part(self.send())

        self.assertIn('Admin username: testadmin', text)
        self.assertIn('Admin login URL: http://www.example.com/admin/login', text)
        self.assertIn('so you can log in:', text)
        self.assertIn(self.token, text)

    @override_settings(APP_SHORT_NAME='OTW')
    def test_subject_uses_app_short_name(self):
        self.assertEqual(self.send().subject, '[OTW] Your OTW admin account')


def tagged_gettext(message):
    """Stand-in catalog: marks each translated string with the active language."""
    if not message:
        return message
    return f'[{translation.get_language()}] {message}'


class TranslatedEmailTests(TestCase):

    def setUp(self):
        self.post = create_admin_post(title='Site maintenance')
        self.comment = create_comment(self.post)

        patcher = patch.object(translation._trans, 'gettext', side_effect=tagged_gettext)
        patcher.start()
        self.addCleanup(patcher.stop)

    @override_settings(ADMIN_EMAIL_LANGUAGE='fr')
    def test_comment_notification_uses_admin_email_language(self):
        self.assertTrue(services.comment_notification(self.comment.id))
        message = mail.outbox[0]

        self.assertEqual(message.subject, '[AO3] [fr] Comment on Site maintenance')
        self.assertEqual(message.extra_headers['Content-Language'], 'fr')
        self.assertIn('<html lang="fr">', html_part(message))
        self.assertIn('[fr] <b>Guest</b> left the following comment', html_part(message))
        self.assertIn('[fr] Guest left the following comment', text_part(message))

    @override_settings(ADMIN_EMAIL_LANGUAGE='fr')
    def test_spam_alert_uses_admin_email_language(self):
        spammer = create_user('spammer')
        work = create_work('Spam', authors=[spammer], spam=True)

        services.send_spam_alert({spammer.id: {'score': 12, 'work_ids': [work.id]}})

        self.assertEqual(mail.outbox[0].subject, '[AO3] [fr] Potential spam alert')

    def test_set_password_uses_admin_preferred_language(self):
        admin = create_admin('frenchadmin', preferred_language='fr')

        with translation.override('de'):
            self.assertTrue(services.set_password_notification(admin, 'abc123'))
            self.assertEqual(translation.get_language(), 'de')

        message = mail.outbox[0]
        self.assertEqual(message.subject, '[AO3] [fr] Your AO3 admin account')
        self.assertEqual(message.extra_headers['Content-Language'], 'fr')
        self.assertIn('[fr] Admin username: frenchadmin', text_part(message))

    @override_settings(ADMIN_EMAIL_LANGUAGE='es')
    def test_set_password_without_preference_uses_admin_email_language(self):
        admin = create_admin('newadmin')

        with translation.override('fr'):
            services.set_password_notification(admin, 'abc123')

        self.assertEqual(mail.outbox[0].subject, '[AO3] [es] Your AO3 admin account')
