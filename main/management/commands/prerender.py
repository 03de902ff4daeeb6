from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from asiatek.site_config import get_site_config
from main.prerender import PrerenderError, run_prerender


class Command(BaseCommand):
    help = 'Генерирует статические HTML-страницы, sitemap.xml и robots.txt для поисковых ботов'

    def add_arguments(self, parser):
        parser.add_argument('--output', default=None, help='Каталог для результата')
        parser.add_argument('--manifest', default=None, help='Путь к staticfiles.json')

    def handle(self, *args, **options):
        output_dir = options['output'] or settings.PRERENDER_OUTPUT_DIR
        manifest_path = options['manifest'] or settings.PRERENDER_MANIFEST_PATH

        try:
            summary = run_prerender(output_dir, manifest_path, get_site_config().base_url)
        except PrerenderError as e:
            raise CommandError(f"Prerender failed: {e}")

        self.stdout.write(self.style.SUCCESS(
            f"Prerendered {len(summary['rendered'])} pages into {output_dir}"
        ))
        if summary['failed']:
            self.stderr.write(f"Failed routes: {', '.join(summary['failed'])}")
