import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('mb_tagging', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='ErrorItem',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('notebook', models.CharField(blank=True, default='', help_text="Name of the notebook holding this item, e.g. '數學錯題本'.", max_length=255)),
                ('subject', models.CharField(blank=True, choices=[('math', '數學'), ('physics', '物理'), ('chemistry', '化學'), ('biology', '生物'), ('english', '英語'), ('chinese', '國文'), ('history', '歷史'), ('geography', '地理'), ('politics', '公民'), ('other', '其他')], help_text='Subject key. Inferred from the notebook name when empty.', max_length=32, null=True)),
                ('question_text', models.TextField(blank=True, default='')),
                ('grade_semester', models.CharField(blank=True, default='', help_text="Grade and semester the question belongs to, as free text (e.g. '國一上', 'Grade 7').", max_length=64)),
                ('knowledge_points', models.TextField(blank=True, help_text='Legacy knowledge points: a JSON list or a comma-separated string.', null=True)),
                ('review_stage', models.PositiveIntegerField(default=0)),
                ('next_review_at', models.DateTimeField(blank=True, null=True)),
                ('mastered', models.BooleanField(default=False)),
                ('created', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ('tags', models.ManyToManyField(blank=True, related_name='error_items', to='mb_tagging.knowledgetag')),
            ],
            options={
                'ordering': ['-created', '-id'],
                'indexes': [models.Index(fields=['mastered', 'next_review_at'], name='mb_notebook_due_idx')],
            },
        ),
    ]
