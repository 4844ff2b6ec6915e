from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='SellerPackage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('slug', models.SlugField(unique=True)),
                ('name', models.CharField(max_length=100)),
                ('price', models.PositiveIntegerField()),
                ('payment_amount', models.PositiveIntegerField()),
                ('recommended', models.BooleanField(default=False)),
                ('features', models.JSONField(blank=True, default=list)),
                ('photo_uploads', models.PositiveIntegerField(default=0)),
                ('video_uploads', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'ordering': ('price',),
            },
        ),
    ]
