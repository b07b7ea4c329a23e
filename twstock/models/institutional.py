from sqlalchemy import Column, Integer, BigInteger, Date, DateTime, ForeignKey, UniqueConstraint

from twstock.database import Base
from twstock.models.trading import _BigId


class InstitutionalInvestor(Base):
    """三大法人買賣超模型 (單位: 股)"""

    __tablename__ = "institutional_investors"
    __table_args__ = (
        UniqueConstraint("stock_id", "trade_date", name="uq_institutional_stock_date"),
    )

    id = Column(_BigId, primary_key=True, index=True)
    stock_id = Column(Integer, ForeignKey("stocks.id", ondelete="CASCADE"), nullable=False, index=True)
    trade_date = Column(Date, nullable=False, index=True)

    # 外資
    foreign_buy = Column(BigInteger, nullable=False)
    foreign_sell = Column(BigInteger, nullable=False)
    foreign_net = Column(BigInteger, nullable=False)

    # 投信
    investment_trust_buy = Column(BigInteger, nullable=False)
    investment_trust_sell = Column(BigInteger, nullable=False)
    investment_trust_net = Column(BigInteger, nullable=False)

    # 自營商
    dealer_buy = Column(BigInteger, nullable=False)
    dealer_sell = Column(BigInteger, nullable=False)
    dealer_net = Column(BigInteger, nullable=False)

    total_net = Column(BigInteger, nullable=False)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<InstitutionalInvestor(stock_id={self.stock_id}, date={self.trade_date}, total_net={self.total_net})>"
