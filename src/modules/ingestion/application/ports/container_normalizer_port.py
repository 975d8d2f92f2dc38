from abc import ABC, abstractmethod


class ContainerNormalizerPort(ABC):
    OUTPUT_SUFFIX = ".processing.mp4"

    def output_path_for(self, input_path: str) -> str:
        """Path the normalized rewrite of input_path is written to."""
        return f"{input_path}{self.OUTPUT_SUFFIX}"

    @abstractmethod
    def normalize(self, input_path: str) -> str:
        """
        Rewrites a container so its index precedes the sample data.
        Samples are stream-copied, never re-encoded.

        Returns:
            Path of the rewritten file, output_path_for(input_path).

        Raises:
            NormalizeFailure: If the rewrite fails. The output path is not valid then.
        """
        pass
