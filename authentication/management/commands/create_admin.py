from django.core.management.base import BaseCommand, CommandError
from authentication.models import CustomUser


class Command(BaseCommand):
    help = 'Create an admin user, or promote an existing user to admin'

    def add_arguments(self, parser):
        parser.add_argument('username', type=str)
        parser.add_argument('--password', type=str, help='Password for a new admin user')
        parser.add_argument('--phone', type=str, help='Phone number with country code (e.g., +919876543210)')

    def handle(self, *args, **options):
        username = options['username']

        try:
            user = CustomUser.objects.get(username=username)
            user.role = 'admin'
            user.is_staff = True
            user.save()
            self.stdout.write(
                self.style.SUCCESS(f'Updated existing user {username} to admin')
            )
            return
        except CustomUser.DoesNotExist:
            pass

        if not options['password']:
            raise CommandError('--password is required when creating a new admin user')

        CustomUser.objects.create_user(
            username=username,
            password=options['password'],
            phone_number=options['phone'] or None,
            role='admin',
            is_staff=True,
        )
        self.stdout.write(
            self.style.SUCCESS(f'Created new admin user: {username}')
        )
