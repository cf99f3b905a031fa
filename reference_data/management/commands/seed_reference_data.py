from django.core.management.base import BaseCommand
from reference_data.models import LoadType, District


DEFAULT_LOAD_TYPES = [
    'Rice', 'Wheat', 'Cotton', 'Sugar', 'Cement',
    'Steel', 'Textiles', 'Electronics', 'Furniture', 'Other',
]

DEFAULT_DISTRICTS = [
    ('Bangalore Urban', 'Karnataka'),
    ('Mysore', 'Karnataka'),
    ('Chennai', 'Tamil Nadu'),
    ('Coimbatore', 'Tamil Nadu'),
    ('Ernakulam', 'Kerala'),
    ('Thiruvananthapuram', 'Kerala'),
    ('Hyderabad', 'Telangana'),
    ('Mumbai', 'Maharashtra'),
    ('Pune', 'Maharashtra'),
]


class Command(BaseCommand):
    help = 'Seed default load types and districts (existing records are left untouched)'

    def handle(self, *args, **kwargs):
        self.stdout.write('Seeding reference data...')

        created_load_types = 0
        for name in DEFAULT_LOAD_TYPES:
            _, created = LoadType.objects.get_or_create(name=name)
            created_load_types += int(created)

        created_districts = 0
        for name, state in DEFAULT_DISTRICTS:
            _, created = District.objects.get_or_create(name=name, state=state)
            created_districts += int(created)

        self.stdout.write(self.style.SUCCESS(
            f'Created {created_load_types} load type(s) and {created_districts} district(s)'
        ))
