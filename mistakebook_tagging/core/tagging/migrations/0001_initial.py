import django.db.models.deletion
from django.db import migrations, models

import mistakebook.lib.fields

SUBJECT_CHOICES = [
    ('math', '數學'),
    ('physics', '物理'),
    ('chemistry', '化學'),
    ('biology', '生物'),
    ('english', '英語'),
    ('chinese', '國文'),
    ('history', '歷史'),
    ('geography', '地理'),
    ('politics', '公民'),
    ('other', '其他'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='KnowledgeTag',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('name', mistakebook.lib.fields.MultiCollationCharField(db_collations={'mysql': 'utf8mb4_bin', 'sqlite': 'BINARY'}, help_text="Display name of the tag. May be corrected in place without changing the tag's identity.", max_length=255)),
                ('subject', models.CharField(choices=SUBJECT_CHOICES, help_text='Key of the subject whose knowledge tree this tag belongs to.', max_length=32)),
                ('is_system', models.BooleanField(default=False, help_text='Curriculum-authored tag. Custom tags created from user or AI input leave this unset.')),
                ('order', models.PositiveIntegerField(default=0, help_text='1-based position among siblings. Part of the structural identity of system tags.')),
                ('created', models.DateTimeField(auto_now_add=True)),
                ('modified', models.DateTimeField(auto_now=True)),
                ('parent', models.ForeignKey(blank=True, default=None, help_text='Tag that lives one level up from the current tag, forming a hierarchy. Empty for grade/semester roots.', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='children', to='mb_tagging.knowledgetag')),
            ],
            options={
                'ordering': ['order', 'id'],
            },
        ),
        migrations.CreateModel(
            name='CurriculumImportTask',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('subject', models.CharField(choices=SUBJECT_CHOICES, help_text='Subject whose curriculum is being imported', max_length=32)),
                ('log', models.TextField(blank=True, default='', help_text='Import progress, one line per step')),
                ('status', models.CharField(choices=[('loading_data', 'Loading Data'), ('planning', 'Planning'), ('executing', 'Executing'), ('success', 'Success'), ('error', 'Error')], max_length=20)),
                ('creation_date', models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.AddIndex(
            model_name='knowledgetag',
            index=models.Index(fields=['subject', 'parent', 'order'], name='mb_tagging_position_idx'),
        ),
        migrations.AddIndex(
            model_name='knowledgetag',
            index=models.Index(fields=['subject', 'name'], name='mb_tagging_name_idx'),
        ),
        migrations.AddConstraint(
            model_name='knowledgetag',
            constraint=models.UniqueConstraint(condition=models.Q(('is_system', True)), fields=('subject', 'parent', 'order'), name='mb_tagging_system_structural_key'),
        ),
        migrations.AddIndex(
            model_name='curriculumimporttask',
            index=models.Index(fields=['subject', '-creation_date'], name='mb_tagging_task_subject_idx'),
        ),
    ]
