"""Documentation build: stages upstream doxygen XML, then runs ``make html``."""

import logging
import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import Dict, Optional

import requests

from ..config import BuildConfig, read_short_version
from ..exceptions import DocsFetchError
from .process import CommandResult, ProcessRunner

logger = logging.getLogger(__name__)

XML_ARCHIVE_URL = "https://d1664dvumjb44w.cloudfront.net/{project}/xml_tar/{version}/xml.tar.gz"

# Upstream projects whose prebuilt XML the docs cross-reference.
XML_PROJECTS = ("libcugraphops", "libwholegraph")


def xml_env_var(project: str) -> str:
    return f"XML_DIR_{project.upper()}"


class DocsBuilder:
    """Fetches the doxygen XML of upstream projects and builds the HTML docs."""

    def __init__(
        self,
        runner: ProcessRunner,
        config: BuildConfig,
        session: Optional[requests.Session] = None,
        timeout: int = 60,
    ):
        self.runner = runner
        self.config = config
        self.session = session
        self.timeout = timeout

    def _get(self, url: str) -> requests.Response:
        getter = self.session.get if self.session is not None else requests.get
        return getter(url, stream=True, timeout=self.timeout)

    def fetch_xml(self, project: str, version: str) -> Path:
        """Download and unpack ``project``'s XML archive into its docs dir."""
        xml_dir = self.config.layout.docs_dir / project
        shutil.rmtree(xml_dir, ignore_errors=True)
        try:
            xml_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DocsFetchError(f"Cannot create {xml_dir}: {exc}") from exc

        url = XML_ARCHIVE_URL.format(project=project, version=version)
        logger.info(
            "Downloading xml for %s into %s. Environment variable %s is set to %s",
            project,
            xml_dir,
            xml_env_var(project),
            xml_dir,
        )
        if self.runner.dry_run:
            return xml_dir

        with tempfile.TemporaryDirectory() as tmpdir:
            archive = Path(tmpdir) / "xml.tar.gz"
            try:
                with self._get(url) as response:
                    response.raise_for_status()
                    with open(archive, "wb") as fh:
                        for chunk in response.iter_content(chunk_size=1 << 16):
                            fh.write(chunk)
            except (requests.RequestException, OSError) as exc:
                raise DocsFetchError(f"Failed to download {url}: {exc}") from exc

            try:
                with tarfile.open(archive, "r:gz") as tar:
                    if hasattr(tarfile, "data_filter"):
                        tar.extractall(xml_dir, filter="data")
                    else:  # pragma: no cover
                        tar.extractall(xml_dir)
            except (tarfile.TarError, OSError) as exc:
                raise DocsFetchError(f"Failed to extract {url}: {exc}") from exc
        return xml_dir

    def build(self) -> CommandResult:
        """Stage all XML inputs and run the documentation build."""
        layout = self.config.layout
        version = read_short_version(layout.version_file)
        env: Dict[str, str] = {}
        for project in XML_PROJECTS:
            env[xml_env_var(project)] = str(self.fetch_xml(project, version))

        logger.info("Making libcugraph doc dir")
        libcugraph_doc_dir = layout.docs_dir / "libcugraph"
        shutil.rmtree(libcugraph_doc_dir, ignore_errors=True)
        libcugraph_doc_dir.mkdir(parents=True, exist_ok=True)
        env[xml_env_var("libcugraph")] = str(layout.cpp_dir / "doxygen" / "xml")

        return self.runner.run(["make", "html"], cwd=str(layout.docs_dir), env=env)
