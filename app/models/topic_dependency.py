from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base


class TopicDependency(Base):
    __tablename__ = "topic_dependencies"
    __table_args__ = (UniqueConstraint("topic_id", "depends_on_topic_id", name="uq_topic_dependencies_pair"),)

    id = Column(Integer, primary_key=True)
    topic_id = Column(Integer, ForeignKey("sign_up_topics.id"), nullable=False)
    depends_on_topic_id = Column(Integer, ForeignKey("sign_up_topics.id"), nullable=False)

    topic = relationship("Topic", foreign_keys=[topic_id], back_populates="dependencies")
    depends_on = relationship("Topic", foreign_keys=[depends_on_topic_id], back_populates="dependents")
