from abc import abstractmethod


class PipelineManager:
    """
    One inspection run against one database: connect, execute, report, close.
    """

    @abstractmethod
    def connect(self):
        raise NotImplementedError("This method should be overridden by subclasses")

    @abstractmethod
    def execute(self):
        raise NotImplementedError("This method should be overridden by subclasses")

    @abstractmethod
    def generate_report(self, results):
        raise NotImplementedError("This method should be overridden by subclasses")

    @abstractmethod
    def close(self):
        raise NotImplementedError("This method should be overridden by subclasses")
